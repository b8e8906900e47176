"""Domain model entities for storeledger.

These are pure, immutable data classes. A change to a store or group is made
by building a new value (``dataclasses.replace``), never by editing one in
place, so a caller holding an older Group never observes a partial update.
Transfers and receipts are correlated by a plain ``id`` value so the whole
model survives a JSON round trip.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class EntryStatus(str, Enum):
    """Settlement status of an entry."""

    OPEN = "open"
    SCHEDULED = "scheduled"

    def toggled(self) -> "EntryStatus":
        return EntryStatus.SCHEDULED if self is EntryStatus.OPEN else EntryStatus.OPEN


class PaymentMethod(str, Enum):
    """How a scheduled payment is settled."""

    PIX = "PIX"
    BOLETO = "Boleto"
    RECIBO = "Recibo"
    NFE = "NF-e"
    CHEQUE = "Cheque"
    GUIA = "Guia"
    OUTROS = "Outros"


class PayrollCategory(str, Enum):
    """Category tag of a payroll line."""

    SALARIO = "SALÁRIO"
    ADIANTAMENTO = "ADIANTAMENTO SALARIAL"
    GRATIFICACAO = "GRATIFICAÇÃO"
    DECIMO_TERCEIRO = "13°"


class EntryKind(str, Enum):
    """Entry collections of a store.

    The value doubles as the name of the matching attribute on ``Store`` and
    ``StoreHistory``.
    """

    AUTO_DEBIT = "auto_debits"
    PAYROLL = "payroll"
    SCHEDULED = "scheduled"
    TRANSFER = "transfers_out"
    RECEIPT = "receipts"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    EntryKind.AUTO_DEBIT: "dda",
    EntryKind.PAYROLL: "payroll",
    EntryKind.SCHEDULED: "scheduled",
    EntryKind.TRANSFER: "transfer",
    EntryKind.RECEIPT: "receipt",
}


@dataclass(frozen=True)
class AutoDebit:
    """Auto-debit (DDA) bill with a due date."""

    beneficiary: str
    document_id: str
    due_date: date
    amount: Decimal
    status: EntryStatus = EntryStatus.OPEN


@dataclass(frozen=True)
class ScheduledPayment:
    """Scheduled payment; payroll lines carry a ``payroll_category``."""

    payee: str
    method: PaymentMethod
    amount: Decimal
    date: date
    pix_key: Optional[str] = None
    tax_id: Optional[str] = None
    description: Optional[str] = None
    status: EntryStatus = EntryStatus.OPEN
    payroll_category: Optional[PayrollCategory] = None
    attachment_ref: Optional[str] = None


@dataclass(frozen=True)
class Transfer:
    """Outgoing side of an inter-store transfer."""

    id: int
    origin_store: str
    destination_store: str
    date: date
    amount: Decimal
    description: str = ""
    status: EntryStatus = EntryStatus.OPEN


@dataclass(frozen=True)
class Receipt:
    """Incoming side of a transfer; ``id`` equals the transfer's id."""

    id: int
    amount: Decimal


Entry = Union[AutoDebit, ScheduledPayment, Transfer, Receipt]


@dataclass(frozen=True)
class StoreHistory:
    """Append-only archive of entries moved out of the live set."""

    auto_debits: tuple[AutoDebit, ...] = ()
    payroll: tuple[ScheduledPayment, ...] = ()
    scheduled: tuple[ScheduledPayment, ...] = ()
    transfers_out: tuple[Transfer, ...] = ()
    receipts: tuple[Receipt, ...] = ()

    def entries(self, kind: EntryKind) -> tuple:
        return getattr(self, kind.value)


@dataclass(frozen=True)
class Store:
    """One retail unit with its opening balance, live ledger and history."""

    opening_balance: Decimal
    created_on: date
    auto_debits: tuple[AutoDebit, ...] = ()
    payroll: tuple[ScheduledPayment, ...] = ()
    scheduled: tuple[ScheduledPayment, ...] = ()
    transfers_out: tuple[Transfer, ...] = ()
    receipts: tuple[Receipt, ...] = ()
    history: StoreHistory = field(default_factory=StoreHistory)

    def entries(self, kind: EntryKind) -> tuple:
        return getattr(self, kind.value)

    def has_live_entries(self) -> bool:
        return any(self.entries(kind) for kind in EntryKind)


@dataclass(frozen=True)
class Supplier:
    """Payee directory entry, unique under the normalized name."""

    id: str
    name: str
    tax_id: Optional[str] = None
    pix_key: Optional[str] = None


@dataclass(frozen=True)
class AlertRule:
    """Operator-defined predicate set that raises a warning message.

    Unset predicates are vacuously satisfied.
    """

    id: str
    message: str
    term: Optional[str] = None
    document_id: Optional[str] = None
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    is_recurring: bool = False

    def has_predicates(self) -> bool:
        return bool(
            (self.term and self.term.strip())
            or (self.document_id and self.document_id.strip())
            or self.amount is not None
            or self.due_date is not None
        )


@dataclass(frozen=True)
class Group:
    """Stores managed together, sharing suppliers and alert rules.

    ``stores`` keeps insertion order; transforms rebuild the dict in the same
    key order instead of re-inserting keys.
    """

    stores: dict[str, Store] = field(default_factory=dict)
    suppliers: tuple[Supplier, ...] = ()
    alert_rules: tuple[AlertRule, ...] = ()


@dataclass(frozen=True)
class StoreTotals:
    """Derived totals of a store's live entries."""

    auto_debits: Decimal
    payroll: Decimal
    scheduled: Decimal
    transfers: Decimal
    expenses: Decimal
    receipts: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AggregatedItem:
    """Flattened, kind-tagged entry used by views and exports."""

    store_name: str
    kind: EntryKind
    entry: Entry
    archived: bool = False
