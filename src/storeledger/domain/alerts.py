"""Payment alert rule matching."""

import re
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union

from storeledger.domain.entities import (
    AlertRule,
    AutoDebit,
    EntryKind,
    EntryStatus,
    Group,
    ScheduledPayment,
)
from storeledger.domain.errors import NotFoundError, ValidationError
from storeledger.domain.ledger import get_store

AMOUNT_TOLERANCE = Decimal("0.01")

# Rule documents up to this many digits are matched as raw text (partial CNPJ/CPF).
SHORT_DOCUMENT_DIGITS = 4

Alertable = Union[AutoDebit, ScheduledPayment]


def digits_only(text: str) -> str:
    """Strip everything but digits."""
    return re.sub(r"\D", "", text or "")


def _subject(entry: Alertable) -> tuple[str, str, Decimal, date]:
    """Return (search text, document text, amount, date) for an entry."""
    if isinstance(entry, AutoDebit):
        return (
            f"{entry.beneficiary} {entry.document_id}",
            entry.document_id,
            entry.amount,
            entry.due_date,
        )
    description = entry.description or ""
    return (
        f"{entry.payee} {description}",
        f"{description} {entry.pix_key or ''}",
        entry.amount,
        entry.date,
    )


def _document_matches(rule_document: str, entry_document: str) -> bool:
    """Compare digits for long documents, otherwise raw text ignoring case."""
    rule_digits = digits_only(rule_document)
    if len(rule_digits) > SHORT_DOCUMENT_DIGITS:
        return rule_digits in digits_only(entry_document)
    return rule_document.strip().lower() in entry_document.lower()


def rule_matches(rule: AlertRule, entry: Alertable) -> bool:
    """Return True if every predicate set on the rule holds for the entry."""
    text, document, amount, entry_date = _subject(entry)

    if rule.term and rule.term.strip():
        if rule.term.strip().lower() not in text.lower():
            return False
    if rule.document_id and rule.document_id.strip():
        if not _document_matches(rule.document_id, document):
            return False
    if rule.amount is not None:
        if abs(rule.amount - amount) > AMOUNT_TOLERANCE:
            return False
    if rule.due_date is not None:
        if rule.due_date != entry_date:
            return False
    return True


def match_rule(rules: Sequence[AlertRule], entry: Alertable) -> Optional[AlertRule]:
    """Return the first rule, in list order, whose predicates all hold.

    Rules are not ranked by specificity; the author orders them.
    """
    for rule in rules:
        if rule_matches(rule, entry):
            return rule
    return None


def validate_rule(rule: AlertRule) -> None:
    """Reject rules that would match everything or say nothing.

    Raises:
        ValidationError: If no predicate is set or the message is empty
    """
    if not rule.has_predicates():
        raise ValidationError(
            "Alert rule needs at least one criterion (term, document, amount or date)"
        )
    if not rule.message or not rule.message.strip():
        raise ValidationError("Alert rule needs a message")


def store_alerts(
    group: Group, store_name: str
) -> list[tuple[EntryKind, int, Alertable, AlertRule]]:
    """Match the group's rules against every live bill and payment of a store.

    Returns:
        List of (kind, index, entry, rule) for entries that matched
    """
    store = get_store(group, store_name)
    matches = []
    for kind in (EntryKind.AUTO_DEBIT, EntryKind.PAYROLL, EntryKind.SCHEDULED):
        for index, entry in enumerate(store.entries(kind)):
            rule = match_rule(group.alert_rules, entry)
            if rule is not None:
                matches.append((kind, index, entry, rule))
    return matches


def is_overdue(auto_debit: AutoDebit, today: date) -> bool:
    """Return True for an open bill whose due date has passed."""
    return auto_debit.status == EntryStatus.OPEN and auto_debit.due_date < today


def add_rule(group: Group, rule: AlertRule) -> Group:
    """Validate a rule and append it to the group's rule list.

    A rule without an id gets a fresh one.
    """
    validate_rule(rule)
    if not rule.id:
        rule = replace(rule, id=f"rule-{uuid.uuid4().hex[:12]}")
    return replace(group, alert_rules=group.alert_rules + (rule,))


def remove_rule(group: Group, rule_id: str) -> Group:
    """Delete an alert rule by id.

    Raises:
        NotFoundError: If no rule has the id
    """
    if not any(r.id == rule_id for r in group.alert_rules):
        raise NotFoundError(f"Alert rule '{rule_id}' not found")
    return replace(group, alert_rules=tuple(r for r in group.alert_rules if r.id != rule_id))
