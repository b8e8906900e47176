"""Archival ("daily clear") of live entries into store history.

Clearing is one synchronous transform from a Group to a new Group. Receipts
paired with a cleared store's outgoing transfers are archived at their
destination before anything else moves, so a transfer is never archived on
one side while its receipt stays live on the other.
"""

import logging
from dataclasses import replace
from typing import Iterable

from storeledger.domain.entities import EntryKind, Group, StoreHistory
from storeledger.domain.ledger import get_store

logger = logging.getLogger(__name__)


def has_any_live_entries(group: Group) -> bool:
    """Return True if any store of the group has a live entry of any kind."""
    return any(store.has_live_entries() for store in group.stores.values())


def _archive(group: Group, store_names: Iterable[str]) -> Group:
    names = list(store_names)
    live = {
        name: {kind: list(store.entries(kind)) for kind in EntryKind}
        for name, store in group.stores.items()
    }
    history = {
        name: {kind: list(store.history.entries(kind)) for kind in EntryKind}
        for name, store in group.stores.items()
    }

    # Step 1: pull every paired receipt into its destination's history,
    # keeping the destination's live order.
    paired: dict[str, set[int]] = {}
    for name in names:
        for transfer in live[name][EntryKind.TRANSFER]:
            destination = transfer.destination_store
            if destination not in live:
                logger.warning(
                    "Transfer %s from '%s' points to missing store '%s'; archiving it alone",
                    transfer.id,
                    name,
                    destination,
                )
                continue
            if not any(r.id == transfer.id for r in live[destination][EntryKind.RECEIPT]):
                logger.warning(
                    "No receipt for transfer %s in '%s'; archiving the transfer alone",
                    transfer.id,
                    destination,
                )
                continue
            paired.setdefault(destination, set()).add(transfer.id)

    for destination, ids in paired.items():
        receipts = live[destination][EntryKind.RECEIPT]
        history[destination][EntryKind.RECEIPT].extend(r for r in receipts if r.id in ids)
        live[destination][EntryKind.RECEIPT] = [r for r in receipts if r.id not in ids]

    # Steps 2 and 3: append what is left to history and empty the live arrays.
    for name in names:
        for kind in EntryKind:
            history[name][kind].extend(live[name][kind])
            live[name][kind] = []

    stores = {}
    for name, store in group.stores.items():
        fields = {kind.value: tuple(live[name][kind]) for kind in EntryKind}
        archived = StoreHistory(**{kind.value: tuple(history[name][kind]) for kind in EntryKind})
        stores[name] = replace(store, history=archived, **fields)

    logger.debug("Archived live entries of %s", ", ".join(names) or "no stores")
    return replace(group, stores=stores)


def clear_store(group: Group, store_name: str) -> Group:
    """Move every live entry of one store into its history.

    Receipts at other stores that pair with this store's outgoing transfers
    are archived too. The opening balance, creation date and existing history
    are kept.

    Raises:
        NotFoundError: If the store does not exist
    """
    get_store(group, store_name)
    return _archive(group, [store_name])


def clear_group(group: Group) -> Group:
    """Move every live entry of every store into history, in one pass."""
    return _archive(group, group.stores.keys())
