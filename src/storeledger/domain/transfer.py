"""Two-sided transfer write protocol.

A transfer is stored twice: the ``Transfer`` in the origin's
``transfers_out`` and a ``Receipt`` with the same id in the destination's
``receipts``. Every function here returns a new Group; the input is never
touched, so a rejected write leaves the caller's Group exactly as it was.
"""

import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from storeledger.domain.entities import Group, Receipt, Transfer
from storeledger.domain.errors import InvalidTransferError, store_not_found, transfer_not_found

logger = logging.getLogger(__name__)


def _timestamp_id() -> int:
    return int(time.time() * 1000)


def _used_ids(group: Group) -> set[int]:
    ids: set[int] = set()
    for store in group.stores.values():
        for entries in (
            store.transfers_out,
            store.receipts,
            store.history.transfers_out,
            store.history.receipts,
        ):
            ids.update(entry.id for entry in entries)
    return ids


def _next_id(group: Group, id_factory: Callable[[], int]) -> int:
    candidate = id_factory()
    used = _used_ids(group)
    while candidate in used:
        candidate += 1
    return candidate


def validate_transfer(group: Group, transfer: Transfer) -> None:
    """Check transfer preconditions.

    Raises:
        InvalidTransferError: If origin equals destination, a store is
            missing, or the amount is not positive
    """
    if transfer.origin_store == transfer.destination_store:
        raise InvalidTransferError("Origin and destination stores must differ")
    for name in (transfer.origin_store, transfer.destination_store):
        if name not in group.stores:
            raise InvalidTransferError(store_not_found(name))
    if transfer.amount <= 0:
        raise InvalidTransferError(
            f"Transfer amount must be positive, got {transfer.amount}"
        )


def _strip_pair(group: Group, transfer_id: int) -> Group:
    # Scan every store: origin/destination may have changed since the pair was written.
    stores = {
        name: replace(
            store,
            transfers_out=tuple(t for t in store.transfers_out if t.id != transfer_id),
            receipts=tuple(r for r in store.receipts if r.id != transfer_id),
        )
        for name, store in group.stores.items()
    }
    return replace(group, stores=stores)


def create_or_update_transfer(
    group: Group,
    transfer: Transfer,
    previous_id: Optional[int] = None,
    id_factory: Optional[Callable[[], int]] = None,
) -> Group:
    """Write a transfer and its matching receipt.

    On the edit path (``previous_id`` given) both sides of the old pair are
    removed from every store first and the id is reused. Otherwise a fresh id
    is drawn from ``id_factory`` (millisecond timestamp by default) and bumped
    until it is unused in the group. The ``id`` carried by ``transfer`` is
    ignored.

    Args:
        group: Current group
        transfer: Transfer to write
        previous_id: Id of the pair being edited, if any
        id_factory: Source of fresh ids

    Returns:
        New Group holding exactly one Transfer and one Receipt with the id

    Raises:
        InvalidTransferError: If a precondition fails, or ``previous_id`` is
            not a live transfer; nothing is changed
    """
    validate_transfer(group, transfer)

    if previous_id is not None:
        if find_transfer(group, previous_id) is None:
            raise InvalidTransferError(transfer_not_found(previous_id))
        updated = _strip_pair(group, previous_id)
        transfer_id = previous_id
    else:
        updated = group
        transfer_id = _next_id(group, id_factory or _timestamp_id)

    new_transfer = replace(transfer, id=transfer_id)
    receipt = Receipt(id=transfer_id, amount=new_transfer.amount)

    stores = {}
    for name, store in updated.stores.items():
        if name == new_transfer.origin_store:
            store = replace(store, transfers_out=store.transfers_out + (new_transfer,))
        elif name == new_transfer.destination_store:
            store = replace(store, receipts=store.receipts + (receipt,))
        stores[name] = store

    logger.debug(
        "Wrote transfer %s: %s -> %s (%s)",
        transfer_id,
        new_transfer.origin_store,
        new_transfer.destination_store,
        new_transfer.amount,
    )
    return replace(updated, stores=stores)


def delete_transfer(group: Group, transfer_id: int) -> Group:
    """Remove both sides of a transfer pair from every store.

    An unknown id leaves the group's contents unchanged.
    """
    logger.debug("Deleting transfer %s", transfer_id)
    return _strip_pair(group, transfer_id)


def find_transfer(group: Group, transfer_id: int) -> Optional[Transfer]:
    """Find a live transfer by id across all stores."""
    for store in group.stores.values():
        for transfer in store.transfers_out:
            if transfer.id == transfer_id:
                return transfer
    return None


def find_transfer_any(group: Group, transfer_id: int) -> Optional[Transfer]:
    """Find a transfer by id in live or archived entries."""
    found = find_transfer(group, transfer_id)
    if found is not None:
        return found
    for store in group.stores.values():
        for transfer in store.history.transfers_out:
            if transfer.id == transfer_id:
                return transfer
    return None
