"""Tests for alert rule matching."""

import pytest
from datetime import date
from decimal import Decimal

from storeledger.domain.alerts import (
    add_rule,
    is_overdue,
    match_rule,
    remove_rule,
    store_alerts,
    validate_rule,
)
from storeledger.domain.entities import (
    AlertRule,
    AutoDebit,
    EntryKind,
    EntryStatus,
    PaymentMethod,
    ScheduledPayment,
)
from storeledger.domain.errors import NotFoundError, ValidationError
from storeledger.domain.stores import add_entries

DAY = date(2024, 5, 10)


def cemig(document_id="12345678000190", amount="500"):
    return AutoDebit(
        beneficiary="CEMIG ENERGIA",
        document_id=document_id,
        due_date=DAY,
        amount=Decimal(amount),
    )


def rule(message="M", **kwargs):
    return AlertRule(id=f"r-{message}", message=message, **kwargs)


class TestMatchRule:
    """Tests for match_rule."""

    def test_first_match_wins(self):
        """Test the first matching rule is returned even if a later one matches."""
        rules = [rule("M1", term="CEMIG"), rule("M2", document_id="123")]
        assert match_rule(rules, cemig()).message == "M1"

    def test_all_predicates_must_hold(self):
        """Test predicates are AND-combined."""
        rules = [rule("M1", term="CEMIG", amount=Decimal("999")), rule("M2", term="cemig")]
        assert match_rule(rules, cemig()).message == "M2"

    def test_no_match(self):
        """Test None is returned when nothing matches."""
        assert match_rule([rule(term="COPASA")], cemig()) is None
        assert match_rule([], cemig()) is None

    def test_term_matches_document(self):
        """Test the term is searched in beneficiary and document."""
        assert match_rule([rule(term="5678000")], cemig()) is not None

    def test_long_document_compares_digits(self):
        """Test a formatted CNPJ matches the bare digits."""
        found = match_rule([rule(document_id="12.345.678/0001-90")], cemig())
        assert found is not None

    def test_short_document_compares_raw_text(self):
        """Test up to four digits are matched as raw text."""
        entry = cemig(document_id="12.345.678/0001-90")
        assert match_rule([rule(document_id="0001")], entry) is not None
        # "5678" appears in the digits but not in the raw text.
        assert match_rule([rule(document_id="5678")], entry) is None

    def test_short_document_ignores_case(self):
        """Test raw-text document matching is case-insensitive."""
        entry = cemig(document_id="NF AB12")
        assert match_rule([rule(document_id="ab12")], entry) is not None
        assert match_rule([rule(document_id=" nf ab ")], entry) is not None

    def test_amount_tolerance(self):
        """Test amounts match within one cent."""
        assert match_rule([rule(amount=Decimal("500.01"))], cemig()) is not None
        assert match_rule([rule(amount=Decimal("499.99"))], cemig()) is not None
        assert match_rule([rule(amount=Decimal("500.02"))], cemig()) is None

    def test_due_date(self):
        """Test the date must be equal."""
        assert match_rule([rule(due_date=DAY)], cemig()) is not None
        assert match_rule([rule(due_date=date(2024, 5, 11))], cemig()) is None

    def test_scheduled_payment_fields(self):
        """Test payments match on payee, description and PIX key."""
        payment = ScheduledPayment(
            payee="Aluguel Centro",
            method=PaymentMethod.PIX,
            amount=Decimal("3500"),
            date=DAY,
            pix_key="11222333000144",
            description="contrato 2024",
        )
        assert match_rule([rule(term="contrato")], payment) is not None
        assert match_rule([rule(document_id="11.222.333/0001-44")], payment) is not None
        assert match_rule([rule(term="aluguel", due_date=DAY)], payment) is not None

    def test_blank_predicates_are_ignored(self):
        """Test whitespace-only term and document are not criteria."""
        assert match_rule([rule(term="  ", document_id=" ")], cemig()) is not None


class TestValidateRule:
    """Tests for validate_rule and rule list edits."""

    def test_rule_without_criteria(self):
        """Test a rule that would match everything is rejected."""
        with pytest.raises(ValidationError, match="at least one criterion"):
            validate_rule(rule(term=" "))

    def test_rule_without_message(self):
        """Test a rule without a message is rejected."""
        with pytest.raises(ValidationError, match="message"):
            validate_rule(AlertRule(id="r", message=" ", term="x"))

    def test_add_rule_assigns_id(self, two_stores):
        """Test added rules get an id and keep list order."""
        group = add_rule(two_stores, AlertRule(id="", message="first", term="a"))
        group = add_rule(group, AlertRule(id="", message="second", term="b"))

        assert [r.message for r in group.alert_rules] == ["first", "second"]
        assert all(r.id.startswith("rule-") for r in group.alert_rules)

    def test_add_invalid_rule(self, two_stores):
        """Test an invalid rule is not added."""
        with pytest.raises(ValidationError):
            add_rule(two_stores, AlertRule(id="", message="nothing"))

    def test_remove_rule(self, two_stores):
        """Test removing by id, and unknown ids."""
        group = add_rule(two_stores, rule("keep", term="a"))
        group = add_rule(group, rule("drop", term="b"))

        group = remove_rule(group, "r-drop")
        assert [r.message for r in group.alert_rules] == ["keep"]
        with pytest.raises(NotFoundError):
            remove_rule(group, "r-drop")


def test_store_alerts(two_stores):
    """Test alerts are reported per kind and index."""
    group = add_rule(two_stores, rule("check", term="CEMIG"))
    group = add_entries(
        group, "X", EntryKind.AUTO_DEBIT, [cemig(), AutoDebit("COPASA", "", DAY, Decimal("80"))]
    )

    alerts = store_alerts(group, "X")

    assert len(alerts) == 1
    kind, index, entry, matched = alerts[0]
    assert (kind, index, matched.message) == (EntryKind.AUTO_DEBIT, 0, "check")
    assert entry.beneficiary == "CEMIG ENERGIA"


def test_is_overdue():
    """Test only open bills past their due date are overdue."""
    bill = cemig()
    assert is_overdue(bill, date(2024, 5, 11))
    assert not is_overdue(bill, DAY)
    scheduled = AutoDebit("CEMIG", "", DAY, Decimal("1"), status=EntryStatus.SCHEDULED)
    assert not is_overdue(scheduled, date(2024, 6, 1))
