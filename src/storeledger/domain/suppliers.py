"""Supplier and collaborator directory shared by a group's stores."""

import logging
import unicodedata
import uuid
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from storeledger.domain.entities import (
    EntryStatus,
    Group,
    PaymentMethod,
    ScheduledPayment,
    Supplier,
)
from storeledger.domain.errors import NotFoundError, ValidationError
from storeledger.domain.ledger import get_store, replace_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollImportStats:
    """Outcome of merging an imported payroll into a store."""

    imported: int
    new_suppliers: int
    pix_recovered: int


def normalize_name(name: str) -> str:
    """Normalize a name for directory lookups.

    Diacritics are stripped, the text trimmed and upper-cased, and internal
    whitespace collapsed to single spaces.
    """
    decomposed = unicodedata.normalize("NFD", name or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.split()).upper()


def _new_supplier_id() -> str:
    return f"sup-{uuid.uuid4().hex[:12]}"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def find_supplier(suppliers: Sequence[Supplier], name: str) -> Optional[Supplier]:
    """Find a supplier whose normalized name equals ``name``'s."""
    key = normalize_name(name)
    for supplier in suppliers:
        if normalize_name(supplier.name) == key:
            return supplier
    return None


def _merge_into(existing: Supplier, tax_id: Optional[str], pix_key: Optional[str]) -> Supplier:
    # Empty values never replace recorded ones.
    return replace(
        existing,
        tax_id=tax_id or existing.tax_id,
        pix_key=pix_key or existing.pix_key,
    )


def upsert_supplier(
    group: Group,
    name: str,
    tax_id: Optional[str] = None,
    pix_key: Optional[str] = None,
) -> Group:
    """Add a supplier, or update the one with the same normalized name.

    Args:
        group: Current group
        name: Supplier name
        tax_id: Optional CPF/CNPJ
        pix_key: Optional PIX key; an empty value never clears a recorded one

    Returns:
        New Group with the updated directory

    Raises:
        ValidationError: If the name is empty
    """
    if not normalize_name(name):
        raise ValidationError("Supplier name cannot be empty")

    tax_id, pix_key = _clean(tax_id), _clean(pix_key)
    existing = find_supplier(group.suppliers, name)
    if existing is None:
        supplier = Supplier(id=_new_supplier_id(), name=name.strip(), tax_id=tax_id, pix_key=pix_key)
        return replace(group, suppliers=group.suppliers + (supplier,))

    merged = _merge_into(existing, tax_id, pix_key)
    if merged == existing:
        return group
    suppliers = tuple(merged if s.id == existing.id else s for s in group.suppliers)
    return replace(group, suppliers=suppliers)


def remove_supplier(group: Group, supplier_id: str) -> Group:
    """Delete a supplier from the directory.

    Raises:
        NotFoundError: If no supplier has the id
    """
    if not any(s.id == supplier_id for s in group.suppliers):
        raise NotFoundError(f"Supplier '{supplier_id}' not found")
    return replace(group, suppliers=tuple(s for s in group.suppliers if s.id != supplier_id))


def remember_payee(group: Group, payment: ScheduledPayment) -> Group:
    """Record the payee of a manually saved payment and its PIX key."""
    return upsert_supplier(group, payment.payee, tax_id=payment.tax_id, pix_key=payment.pix_key)


def merge_payroll_import(
    group: Group, store_name: str, items: Sequence[ScheduledPayment]
) -> tuple[Group, PayrollImportStats]:
    """Append imported payroll lines to a store, using the directory as memory.

    Unknown collaborators are registered under their upper-cased name.
    Missing tax ids and PIX keys are filled in both directions: the directory
    learns them from the import, and lines lacking a PIX key recover the one
    remembered for the same normalized name. Every line becomes an open PIX
    payment.

    Returns:
        Tuple of (new Group, PayrollImportStats)

    Raises:
        NotFoundError: If the store does not exist
    """
    store = get_store(group, store_name)
    directory = list(group.suppliers)
    new_suppliers = 0
    pix_recovered = 0
    lines = []

    for item in items:
        tax_id, pix_key = _clean(item.tax_id), _clean(item.pix_key)
        existing = find_supplier(directory, item.payee)
        if existing is None:
            collaborator = Supplier(
                id=_new_supplier_id(),
                name=" ".join(item.payee.split()).upper(),
                tax_id=tax_id,
                pix_key=pix_key,
            )
            directory.append(collaborator)
            new_suppliers += 1
        else:
            collaborator = _merge_into(existing, tax_id, pix_key)
            directory = [collaborator if s.id == existing.id else s for s in directory]

        if pix_key is None and collaborator.pix_key:
            pix_recovered += 1

        lines.append(
            replace(
                item,
                method=PaymentMethod.PIX,
                status=EntryStatus.OPEN,
                tax_id=tax_id or collaborator.tax_id,
                pix_key=pix_key or collaborator.pix_key,
            )
        )

    updated = replace(group, suppliers=tuple(directory))
    updated = replace_store(updated, store_name, replace(store, payroll=store.payroll + tuple(lines)))
    stats = PayrollImportStats(
        imported=len(lines), new_suppliers=new_suppliers, pix_recovered=pix_recovered
    )
    logger.debug("Payroll import into '%s': %s", store_name, stats)
    return updated, stats
