"""Filtering of aggregated items for the transactions view."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from storeledger.domain.entities import (
    AggregatedItem,
    AutoDebit,
    EntryKind,
    EntryStatus,
    Group,
    Receipt,
    ScheduledPayment,
    Transfer,
)
from storeledger.domain.transfer import find_transfer_any
from storeledger.utils.amount_parser import format_brl


def item_date(item: AggregatedItem, group: Group) -> Optional[date]:
    """Return the date shown for an item.

    Receipts have no date of their own and take the originating transfer's.
    """
    entry = item.entry
    if isinstance(entry, AutoDebit):
        return entry.due_date
    if isinstance(entry, (ScheduledPayment, Transfer)):
        return entry.date
    origin = find_transfer_any(group, entry.id)
    return origin.date if origin is not None else None


def item_status(item: AggregatedItem) -> EntryStatus:
    """Return the item's status; a receipt counts as settled."""
    if isinstance(item.entry, Receipt):
        return EntryStatus.SCHEDULED
    return item.entry.status


def _search_text(item: AggregatedItem, group: Group) -> str:
    entry = item.entry
    parts = [item.store_name]
    if isinstance(entry, AutoDebit):
        parts += [entry.beneficiary, entry.document_id, entry.due_date.strftime("%d/%m/%Y")]
    elif isinstance(entry, ScheduledPayment):
        parts += [
            entry.payee,
            entry.description or "",
            entry.payroll_category.value if entry.payroll_category else "",
            entry.method.value,
            entry.pix_key or "",
            entry.date.strftime("%d/%m/%Y"),
        ]
    elif isinstance(entry, Transfer):
        parts += [
            entry.description,
            entry.origin_store,
            entry.destination_store,
            entry.date.strftime("%d/%m/%Y"),
        ]
    else:
        origin = find_transfer_any(group, entry.id)
        parts.append(f"from: {origin.origin_store if origin else 'unknown'}")
        if origin is not None:
            parts.append(origin.date.strftime("%d/%m/%Y"))
    parts.append(format_brl(entry.amount))
    return " ".join(parts).lower()


def filter_items(
    items: Iterable[AggregatedItem],
    group: Group,
    kind: Optional[EntryKind] = None,
    status: Optional[EntryStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> list[AggregatedItem]:
    """Filter aggregated items like the transactions view does.

    Args:
        items: Items from ``aggregate_items``/``aggregate_group``
        group: Group the items come from (to date receipts)
        kind: Only items of this kind
        status: Only items in this status (receipts count as scheduled)
        start_date: Inclusive lower date bound; undated items are dropped
        end_date: Inclusive upper date bound; undated items are dropped
        search: Case-insensitive text search across the item's fields

    Returns:
        Matching items in input order
    """
    result = []
    needle = search.lower() if search else None
    for item in items:
        if kind is not None and item.kind is not kind:
            continue
        if start_date is not None or end_date is not None:
            when = item_date(item, group)
            if when is None:
                continue
            if start_date is not None and when < start_date:
                continue
            if end_date is not None and when > end_date:
                continue
        if status is not None and item_status(item) is not status:
            continue
        if needle and needle not in _search_text(item, group):
            continue
        result.append(item)
    return result


def net_total(items: Iterable[AggregatedItem]) -> Decimal:
    """Receipts add, every other entry subtracts."""
    total = Decimal("0")
    for item in items:
        if item.kind is EntryKind.RECEIPT:
            total += item.entry.amount
        else:
            total -= item.entry.amount
    return total
