"""Bulk status changes and deletions over a selection of entries.

Selections are sets of positional indices into one entry tuple. Any
structural change of that tuple (a delete, or reloading the store)
invalidates a previously held selection.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Callable, Collection

from storeledger.domain.entities import (
    EntryKind,
    EntryStatus,
    Group,
    PayrollCategory,
    ScheduledPayment,
)
from storeledger.domain.errors import ValidationError, index_out_of_range
from storeledger.domain.ledger import get_store, replace_store


def _check_indices(entries: tuple, selected: Collection[int]) -> None:
    for index in selected:
        if not 0 <= index < len(entries):
            raise ValidationError(index_out_of_range(index, len(entries)))


def _set_status(entries: tuple, selected: Collection[int], target: EntryStatus) -> tuple:
    _check_indices(entries, selected)
    if not any(entries[i].status != target for i in selected):
        return entries
    return tuple(
        replace(entry, status=target) if i in selected and entry.status != target else entry
        for i, entry in enumerate(entries)
    )


def schedule_selected(entries: tuple, selected: Collection[int]) -> tuple:
    """Mark selected open entries as scheduled.

    Already scheduled entries are left as they are; if nothing selected is
    open the input tuple is returned unchanged.
    """
    return _set_status(entries, selected, EntryStatus.SCHEDULED)


def reopen_selected(entries: tuple, selected: Collection[int]) -> tuple:
    """Mark selected scheduled entries as open."""
    return _set_status(entries, selected, EntryStatus.OPEN)


def delete_selected(entries: tuple, selected: Collection[int]) -> tuple:
    """Remove selected entries; the remaining ones are renumbered."""
    _check_indices(entries, selected)
    if not selected:
        return entries
    return tuple(entry for i, entry in enumerate(entries) if i not in selected)


def recategorize_selected(
    entries: tuple[ScheduledPayment, ...],
    selected: Collection[int],
    category: PayrollCategory,
) -> tuple[ScheduledPayment, ...]:
    """Overwrite the payroll category of every selected line."""
    _check_indices(entries, selected)
    if not selected:
        return entries
    return tuple(
        replace(entry, payroll_category=category) if i in selected else entry
        for i, entry in enumerate(entries)
    )


def toggle_status(entries: tuple, index: int) -> tuple:
    """Flip one entry between open and scheduled."""
    _check_indices(entries, [index])
    return tuple(
        replace(entry, status=entry.status.toggled()) if i == index else entry
        for i, entry in enumerate(entries)
    )


def toggle_select_all(entries: tuple, selected: Collection[int]) -> frozenset[int]:
    """Clear the selection when every entry is selected, else select all."""
    all_indices = frozenset(range(len(entries)))
    if entries and all_indices <= set(selected):
        return frozenset()
    return all_indices


def count_in_status(entries: tuple, selected: Collection[int], status: EntryStatus) -> int:
    """Count selected entries currently in ``status``."""
    _check_indices(entries, selected)
    return sum(1 for i in selected if entries[i].status == status)


def selection_total(entries: tuple, selected: Collection[int]) -> Decimal:
    """Sum the amounts of the selected entries."""
    _check_indices(entries, selected)
    return sum((entries[i].amount for i in selected), Decimal("0"))


def update_store_entries(
    group: Group,
    store_name: str,
    kind: EntryKind,
    func: Callable[[tuple], tuple],
) -> Group:
    """Apply ``func`` to one entry tuple of one store, copy-on-write.

    Transfers and receipts must go through the transfer protocol for
    structural changes; only status toggles are allowed on transfers here.
    """
    if kind is EntryKind.RECEIPT:
        raise ValidationError("Receipts are managed through their transfer")
    store = get_store(group, store_name)
    entries = store.entries(kind)
    updated = func(entries)
    if updated is entries:
        return group
    if kind is EntryKind.TRANSFER and {t.id for t in updated} != {t.id for t in entries}:
        raise ValidationError("Use the transfer commands to add or remove transfers")
    return replace_store(group, store_name, replace(store, **{kind.value: updated}))
