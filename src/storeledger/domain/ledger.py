"""Derived balances and flattened views of a store's ledger.

Everything here is a pure function of the data model.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable

from storeledger.domain.entities import (
    AggregatedItem,
    EntryKind,
    Group,
    Store,
    StoreTotals,
)
from storeledger.domain.errors import NotFoundError, store_not_found


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, Decimal("0"))


def compute_totals(store: Store) -> StoreTotals:
    """Compute expenses, receipts and balance over live entries.

    Archived entries never contribute. Transfers count by absolute value;
    every other amount is summed as given, including zero or negative ones.

    Args:
        store: Store to total

    Returns:
        StoreTotals with the per-kind breakdown
    """
    auto_debits = _sum(d.amount for d in store.auto_debits)
    payroll = _sum(p.amount for p in store.payroll)
    scheduled = _sum(s.amount for s in store.scheduled)
    transfers = _sum(abs(t.amount) for t in store.transfers_out)
    receipts = _sum(r.amount for r in store.receipts)
    expenses = auto_debits + payroll + scheduled + transfers

    return StoreTotals(
        auto_debits=auto_debits,
        payroll=payroll,
        scheduled=scheduled,
        transfers=transfers,
        expenses=expenses,
        receipts=receipts,
        balance=store.opening_balance - expenses + receipts,
    )


def get_store(group: Group, store_name: str) -> Store:
    """Return a store or raise NotFoundError."""
    store = group.stores.get(store_name)
    if store is None:
        raise NotFoundError(store_not_found(store_name))
    return store


def replace_store(group: Group, store_name: str, store: Store) -> Group:
    """Return a new Group with one store swapped, keeping key order."""
    get_store(group, store_name)
    stores = {
        name: (store if name == store_name else existing)
        for name, existing in group.stores.items()
    }
    return replace(group, stores=stores)


def aggregate_items(
    group: Group, store_name: str, include_history: bool = False
) -> list[AggregatedItem]:
    """Flatten one store's entries into kind-tagged items.

    Live entries come first in kind order (auto-debits, payroll, scheduled,
    transfers, receipts), followed by archived ones when requested.

    Args:
        group: Group holding the store
        store_name: Store to flatten
        include_history: Also include archived entries (``archived=True``)

    Returns:
        List of AggregatedItem

    Raises:
        NotFoundError: If the store does not exist
    """
    store = get_store(group, store_name)
    items = [
        AggregatedItem(store_name=store_name, kind=kind, entry=entry)
        for kind in EntryKind
        for entry in store.entries(kind)
    ]
    if include_history:
        items.extend(
            AggregatedItem(store_name=store_name, kind=kind, entry=entry, archived=True)
            for kind in EntryKind
            for entry in store.history.entries(kind)
        )
    return items


def aggregate_group(group: Group, include_history: bool = False) -> list[AggregatedItem]:
    """Flatten every store of a group, in store order."""
    items: list[AggregatedItem] = []
    for store_name in group.stores:
        items.extend(aggregate_items(group, store_name, include_history=include_history))
    return items
