"""CLI helpers for rendering entries."""

from storeledger.domain.entities import (
    AutoDebit,
    Entry,
    EntryStatus,
    Receipt,
    ScheduledPayment,
    Transfer,
)
from storeledger.utils.amount_parser import format_brl

STATUS_LABELS = {EntryStatus.OPEN: "open", EntryStatus.SCHEDULED: "scheduled"}


def short_date(value) -> str:
    return value.strftime("%d/%m/%Y") if value is not None else "-"


def describe_entry(entry: Entry) -> str:
    """One-line description of any entry."""
    if isinstance(entry, AutoDebit):
        doc = f" [{entry.document_id}]" if entry.document_id else ""
        return (
            f"{short_date(entry.due_date)}  {format_brl(entry.amount):>15s}  "
            f"{STATUS_LABELS[entry.status]:9s}  {entry.beneficiary}{doc}"
        )
    if isinstance(entry, ScheduledPayment):
        extra = []
        if entry.payroll_category is not None:
            extra.append(entry.payroll_category.value)
        extra.append(entry.method.value)
        if entry.pix_key:
            extra.append(f"PIX {entry.pix_key}")
        if entry.description:
            extra.append(entry.description)
        return (
            f"{short_date(entry.date)}  {format_brl(entry.amount):>15s}  "
            f"{STATUS_LABELS[entry.status]:9s}  {entry.payee} ({', '.join(extra)})"
        )
    if isinstance(entry, Transfer):
        desc = f" - {entry.description}" if entry.description else ""
        return (
            f"{short_date(entry.date)}  {format_brl(entry.amount):>15s}  "
            f"{STATUS_LABELS[entry.status]:9s}  #{entry.id} {entry.origin_store} -> "
            f"{entry.destination_store}{desc}"
        )
    if isinstance(entry, Receipt):
        return f"{'':10s}  {format_brl(entry.amount):>15s}  {'received':9s}  transfer #{entry.id}"
    raise TypeError(f"Unknown entry type: {type(entry).__name__}")
