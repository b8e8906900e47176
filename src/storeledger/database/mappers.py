"""Mapper functions to convert between domain entities and JSON documents.

This layer isolates the document format from the domain model. Money is
written as decimal strings and dates as ISO strings; transfer/receipt
correlation is by plain id. Documents exported by the legacy application
(Portuguese keys, ``aberto``/``pago`` statuses, day-first dates, float
amounts) are accepted on input.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from storeledger.domain.entities import (
    AlertRule,
    AutoDebit,
    EntryStatus,
    Group,
    PaymentMethod,
    PayrollCategory,
    Receipt,
    ScheduledPayment,
    Store,
    StoreHistory,
    Supplier,
    Transfer,
)
from storeledger.utils.date_parser import parse_date

_STATUS_ALIASES = {
    "open": EntryStatus.OPEN,
    "scheduled": EntryStatus.SCHEDULED,
    "aberto": EntryStatus.OPEN,
    "pago": EntryStatus.SCHEDULED,
}


def _money(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _optional_money(value: Any) -> Optional[Decimal]:
    return None if value is None or value == "" else Decimal(str(value))


def _date(value: Any) -> date:
    return parse_date(str(value))


def _optional_date(value: Any) -> Optional[date]:
    return _date(value) if value else None


def _status(value: Any) -> EntryStatus:
    if not value:
        return EntryStatus.OPEN
    try:
        return _STATUS_ALIASES[str(value).lower()]
    except KeyError:
        raise ValueError(f"Unknown entry status '{value}'")


def _optional_text(value: Any) -> Optional[str]:
    return value if value else None


# Domain -> document


def auto_debit_to_dict(entry: AutoDebit) -> dict[str, Any]:
    return {
        "beneficiary": entry.beneficiary,
        "document_id": entry.document_id,
        "due_date": entry.due_date.isoformat(),
        "amount": str(entry.amount),
        "status": entry.status.value,
    }


def payment_to_dict(entry: ScheduledPayment) -> dict[str, Any]:
    return {
        "payee": entry.payee,
        "method": entry.method.value,
        "amount": str(entry.amount),
        "date": entry.date.isoformat(),
        "pix_key": entry.pix_key,
        "tax_id": entry.tax_id,
        "description": entry.description,
        "status": entry.status.value,
        "payroll_category": entry.payroll_category.value if entry.payroll_category else None,
        "attachment_ref": entry.attachment_ref,
    }


def transfer_to_dict(entry: Transfer) -> dict[str, Any]:
    return {
        "id": entry.id,
        "origin_store": entry.origin_store,
        "destination_store": entry.destination_store,
        "date": entry.date.isoformat(),
        "amount": str(entry.amount),
        "description": entry.description,
        "status": entry.status.value,
    }


def receipt_to_dict(entry: Receipt) -> dict[str, Any]:
    return {"id": entry.id, "amount": str(entry.amount)}


def _entries_to_dict(holder: Store | StoreHistory) -> dict[str, Any]:
    return {
        "auto_debits": [auto_debit_to_dict(e) for e in holder.auto_debits],
        "payroll": [payment_to_dict(e) for e in holder.payroll],
        "scheduled": [payment_to_dict(e) for e in holder.scheduled],
        "transfers_out": [transfer_to_dict(e) for e in holder.transfers_out],
        "receipts": [receipt_to_dict(e) for e in holder.receipts],
    }


def store_to_dict(store: Store) -> dict[str, Any]:
    return {
        "opening_balance": str(store.opening_balance),
        "created_on": store.created_on.isoformat(),
        **_entries_to_dict(store),
        "history": _entries_to_dict(store.history),
    }


def group_to_dict(group: Group) -> dict[str, Any]:
    """Convert a Group into a JSON-serializable dict."""
    return {
        "stores": {name: store_to_dict(store) for name, store in group.stores.items()},
        "suppliers": [
            {"id": s.id, "name": s.name, "tax_id": s.tax_id, "pix_key": s.pix_key}
            for s in group.suppliers
        ],
        "alert_rules": [
            {
                "id": r.id,
                "message": r.message,
                "term": r.term,
                "document_id": r.document_id,
                "amount": str(r.amount) if r.amount is not None else None,
                "due_date": r.due_date.isoformat() if r.due_date else None,
                "is_recurring": r.is_recurring,
            }
            for r in group.alert_rules
        ],
    }


def groups_to_document(groups: dict[str, Group]) -> dict[str, Any]:
    """Convert an operator's Groups map into a JSON-serializable dict."""
    return {name: group_to_dict(group) for name, group in groups.items()}


# Document -> domain


def auto_debit_from_dict(data: dict[str, Any]) -> AutoDebit:
    return AutoDebit(
        beneficiary=data["beneficiary"],
        document_id=data.get("document_id") or "",
        due_date=_date(data["due_date"]),
        amount=_money(data.get("amount")),
        status=_status(data.get("status")),
    )


def payment_from_dict(data: dict[str, Any]) -> ScheduledPayment:
    category = data.get("payroll_category")
    return ScheduledPayment(
        payee=data["payee"],
        method=PaymentMethod(data.get("method") or PaymentMethod.OUTROS.value),
        amount=_money(data.get("amount")),
        date=_date(data["date"]),
        pix_key=_optional_text(data.get("pix_key")),
        tax_id=_optional_text(data.get("tax_id")),
        description=_optional_text(data.get("description")),
        status=_status(data.get("status")),
        payroll_category=PayrollCategory(category) if category else None,
        attachment_ref=_optional_text(data.get("attachment_ref")),
    )


def transfer_from_dict(data: dict[str, Any]) -> Transfer:
    return Transfer(
        id=int(data["id"]),
        origin_store=data["origin_store"],
        destination_store=data["destination_store"],
        date=_date(data["date"]),
        amount=_money(data.get("amount")),
        description=data.get("description") or "",
        status=_status(data.get("status")),
    )


def receipt_from_dict(data: dict[str, Any]) -> Receipt:
    return Receipt(id=int(data["id"]), amount=_money(data.get("amount")))


def _entries_from_dict(data: dict[str, Any]) -> dict[str, tuple]:
    return {
        "auto_debits": tuple(auto_debit_from_dict(e) for e in data.get("auto_debits") or []),
        "payroll": tuple(payment_from_dict(e) for e in data.get("payroll") or []),
        "scheduled": tuple(payment_from_dict(e) for e in data.get("scheduled") or []),
        "transfers_out": tuple(transfer_from_dict(e) for e in data.get("transfers_out") or []),
        "receipts": tuple(receipt_from_dict(e) for e in data.get("receipts") or []),
    }


def store_from_dict(data: dict[str, Any]) -> Store:
    return Store(
        opening_balance=_money(data.get("opening_balance")),
        created_on=_date(data["created_on"]),
        history=StoreHistory(**_entries_from_dict(data.get("history") or {})),
        **_entries_from_dict(data),
    )


def group_from_dict(data: dict[str, Any]) -> Group:
    """Convert a dict produced by ``group_to_dict`` back into a Group."""
    return Group(
        stores={name: store_from_dict(s) for name, s in (data.get("stores") or {}).items()},
        suppliers=tuple(
            Supplier(
                id=s["id"],
                name=s["name"],
                tax_id=_optional_text(s.get("tax_id")),
                pix_key=_optional_text(s.get("pix_key")),
            )
            for s in data.get("suppliers") or []
        ),
        alert_rules=tuple(
            AlertRule(
                id=r["id"],
                message=r["message"],
                term=_optional_text(r.get("term")),
                document_id=_optional_text(r.get("document_id")),
                amount=_optional_money(r.get("amount")),
                due_date=_optional_date(r.get("due_date")),
                is_recurring=bool(r.get("is_recurring")),
            )
            for r in data.get("alert_rules") or []
        ),
    )


# Legacy documents


def _legacy_payment(data: dict[str, Any]) -> ScheduledPayment:
    category = data.get("categoriaFolha")
    return ScheduledPayment(
        payee=data.get("fornecedor") or "",
        method=PaymentMethod(data.get("tipo") or PaymentMethod.OUTROS.value),
        amount=_money(data.get("valor")),
        date=_date(data["data"]),
        pix_key=_optional_text(data.get("chavePix")),
        tax_id=_optional_text(data.get("cpf")),
        description=_optional_text(data.get("descricao")),
        status=_status(data.get("status")),
        payroll_category=PayrollCategory(category) if category else None,
        attachment_ref=_optional_text(data.get("anexo")),
    )


def _legacy_entries(data: dict[str, Any]) -> dict[str, tuple]:
    return {
        "auto_debits": tuple(
            AutoDebit(
                beneficiary=d.get("benef") or "",
                document_id=d.get("doc") or "",
                due_date=_date(d["venc"]),
                amount=_money(d.get("valor")),
                status=_status(d.get("status")),
            )
            for d in data.get("dda") or []
        ),
        "payroll": tuple(_legacy_payment(p) for p in data.get("folha") or []),
        "scheduled": tuple(_legacy_payment(p) for p in data.get("agend") or []),
        "transfers_out": tuple(
            Transfer(
                id=int(t["id"]),
                origin_store=t["origem"],
                destination_store=t["destino"],
                date=_date(t["data"]),
                amount=_money(t.get("valor")),
                description=t.get("desc") or "",
                status=_status(t.get("status")),
            )
            for t in data.get("transf") or []
        ),
        "receipts": tuple(
            Receipt(id=int(r["id"]), amount=_money(r.get("valor")))
            for r in data.get("receb") or []
        ),
    }


def legacy_group_from_dict(data: dict[str, Any]) -> Group:
    """Convert a group exported by the legacy application."""
    stores = {}
    for name, loja in (data.get("lojas") or {}).items():
        stores[name] = Store(
            opening_balance=_money(loja.get("saldoInicial")),
            created_on=_date(loja["data"]),
            history=StoreHistory(**_legacy_entries(loja.get("history") or {})),
            **_legacy_entries(loja),
        )
    return Group(
        stores=stores,
        suppliers=tuple(
            Supplier(
                id=str(s["id"]),
                name=s["name"],
                tax_id=_optional_text(s.get("cpf")),
                pix_key=_optional_text(s.get("chavePix")),
            )
            for s in data.get("fornecedores") or []
        ),
        alert_rules=tuple(
            AlertRule(
                id=str(r["id"]),
                message=r.get("alertMessage") or "",
                term=_optional_text(r.get("term")),
                document_id=_optional_text(r.get("matchDoc")),
                amount=_optional_money(r.get("matchValue")),
                due_date=_optional_date(r.get("matchDate")),
                is_recurring=bool(r.get("isRecurring")),
            )
            for r in data.get("paymentRules") or []
        ),
    )


def groups_from_document(document: dict[str, Any]) -> dict[str, Group]:
    """Convert a stored or exported document into an operator's Groups map.

    Raises:
        ValueError: If the document is not a mapping of groups
    """
    if not isinstance(document, dict):
        raise ValueError("Ledger document must be a JSON object keyed by group name")
    groups = {}
    for name, data in document.items():
        if not isinstance(data, dict):
            raise ValueError(f"Group '{name}' is not a JSON object")
        if "lojas" in data:
            groups[name] = legacy_group_from_dict(data)
        else:
            groups[name] = group_from_dict(data)
    return groups
