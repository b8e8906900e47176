"""Store lifecycle and single-entry edits within a group."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Sequence

from storeledger.domain.entities import (
    AutoDebit,
    EntryKind,
    Group,
    ScheduledPayment,
    Store,
)
from storeledger.domain.errors import (
    ConflictError,
    ValidationError,
    duplicate_store,
    index_out_of_range,
)
from storeledger.domain.ledger import get_store, replace_store
from storeledger.domain.transfer import delete_transfer

# Kinds written directly by import adapters and manual forms.
EDITABLE_KINDS = {
    EntryKind.AUTO_DEBIT: AutoDebit,
    EntryKind.PAYROLL: ScheduledPayment,
    EntryKind.SCHEDULED: ScheduledPayment,
}


def _editable(kind: EntryKind) -> type:
    if kind not in EDITABLE_KINDS:
        raise ValidationError(
            f"{kind.label} entries cannot be edited directly; use the transfer commands"
        )
    return EDITABLE_KINDS[kind]


def add_store(group: Group, name: str, opening_balance: Decimal, created_on: date) -> Group:
    """Append a new, empty store to the group.

    Raises:
        ValidationError: If the trimmed name is empty
        ConflictError: If a store with that name exists
    """
    name = name.strip()
    if not name:
        raise ValidationError("Store name cannot be empty")
    if name in group.stores:
        raise ConflictError(duplicate_store(name))
    store = Store(opening_balance=opening_balance, created_on=created_on)
    return replace(group, stores={**group.stores, name: store})


def delete_store(group: Group, name: str) -> Group:
    """Remove a store with its whole live and archived content.

    Live transfers sent from or to the store are deleted as pairs first, so
    no other store keeps one side of them.
    """
    get_store(group, name)
    linked = [
        transfer.id
        for store in group.stores.values()
        for transfer in store.transfers_out
        if name in (transfer.origin_store, transfer.destination_store)
    ]
    for transfer_id in linked:
        group = delete_transfer(group, transfer_id)
    return replace(group, stores={k: v for k, v in group.stores.items() if k != name})


def _rename_transfers(transfers: tuple, old: str, new: str) -> tuple:
    return tuple(
        replace(
            t,
            origin_store=new if t.origin_store == old else t.origin_store,
            destination_store=new if t.destination_store == old else t.destination_store,
        )
        for t in transfers
    )


def rename_store(group: Group, old_name: str, new_name: str) -> Group:
    """Rename a store in place, keeping its position in the group.

    Transfers naming the store as origin or destination, live or archived,
    are rewritten to the new name.

    Raises:
        NotFoundError: If the store does not exist
        ValidationError: If the new name is empty
        ConflictError: If another store already has the new name
    """
    get_store(group, old_name)
    new_name = new_name.strip()
    if not new_name:
        raise ValidationError("Store name cannot be empty")
    if new_name == old_name:
        return group
    if new_name in group.stores:
        raise ConflictError(duplicate_store(new_name))

    stores = {}
    for name, store in group.stores.items():
        store = replace(
            store,
            transfers_out=_rename_transfers(store.transfers_out, old_name, new_name),
            history=replace(
                store.history,
                transfers_out=_rename_transfers(store.history.transfers_out, old_name, new_name),
            ),
        )
        stores[new_name if name == old_name else name] = store
    return replace(group, stores=stores)


def set_opening_balance(group: Group, name: str, opening_balance: Decimal) -> Group:
    """Change a store's opening balance."""
    store = get_store(group, name)
    return replace_store(group, name, replace(store, opening_balance=opening_balance))


def add_entries(group: Group, store_name: str, kind: EntryKind, entries: Sequence) -> Group:
    """Append records, in order, to one of a store's editable entry lists.

    Raises:
        ValidationError: If the kind is not editable or a record has the
            wrong type
    """
    entry_type = _editable(kind)
    for entry in entries:
        if not isinstance(entry, entry_type):
            raise ValidationError(
                f"Expected {entry_type.__name__} for {kind.label} entries, got {type(entry).__name__}"
            )
    store = get_store(group, store_name)
    updated = store.entries(kind) + tuple(entries)
    return replace_store(group, store_name, replace(store, **{kind.value: updated}))


def replace_entry(group: Group, store_name: str, kind: EntryKind, index: int, entry) -> Group:
    """Overwrite one entry in place (an edit-in-place correction)."""
    entry_type = _editable(kind)
    if not isinstance(entry, entry_type):
        raise ValidationError(f"Expected {entry_type.__name__} for {kind.label} entries")
    store = get_store(group, store_name)
    entries = store.entries(kind)
    if not 0 <= index < len(entries):
        raise ValidationError(index_out_of_range(index, len(entries)))
    updated = entries[:index] + (entry,) + entries[index + 1:]
    return replace_store(group, store_name, replace(store, **{kind.value: updated}))


def move_entry(
    group: Group, source: str, kind: EntryKind, index: int, destination: str
) -> Group:
    """Move one bill or payroll line from one store to the end of another's list.

    Raises:
        ValidationError: If the stores are the same, the kind is not
            editable, or the index is out of range
        NotFoundError: If either store does not exist
    """
    _editable(kind)
    if source == destination:
        raise ValidationError("Source and destination stores must differ")
    source_store = get_store(group, source)
    destination_store = get_store(group, destination)
    entries = source_store.entries(kind)
    if not 0 <= index < len(entries):
        raise ValidationError(index_out_of_range(index, len(entries)))

    entry = entries[index]
    moved_from = replace(source_store, **{kind.value: entries[:index] + entries[index + 1:]})
    moved_to = replace(
        destination_store, **{kind.value: destination_store.entries(kind) + (entry,)}
    )
    updated = replace_store(group, source, moved_from)
    return replace_store(updated, destination, moved_to)
