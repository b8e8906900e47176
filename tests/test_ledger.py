"""Tests for store totals and item aggregation."""

import pytest
from datetime import date
from decimal import Decimal

from storeledger.domain.entities import (
    AutoDebit,
    EntryKind,
    EntryStatus,
    PaymentMethod,
    Receipt,
    ScheduledPayment,
    Store,
    StoreHistory,
    Transfer,
)
from storeledger.domain.errors import NotFoundError
from storeledger.domain.ledger import (
    aggregate_group,
    aggregate_items,
    compute_totals,
    get_store,
    replace_store,
)

DAY = date(2024, 5, 10)


def bill(amount, status=EntryStatus.OPEN):
    return AutoDebit(
        beneficiary="Energia SA",
        document_id="11222333000144",
        due_date=DAY,
        amount=Decimal(amount),
        status=status,
    )


def payment(amount, payee="Fornecedor"):
    return ScheduledPayment(
        payee=payee, method=PaymentMethod.PIX, amount=Decimal(amount), date=DAY
    )


class TestComputeTotals:
    """Tests for compute_totals."""

    def test_auto_debit_reduces_balance(self):
        """Test an open bill of 200 on a 1000 store leaves 800."""
        store = Store(
            opening_balance=Decimal("1000"),
            created_on=DAY,
            auto_debits=(bill("200"),),
        )
        assert compute_totals(store).balance == Decimal("800")

    def test_status_does_not_affect_balance(self):
        """Test scheduled entries still count as expenses."""
        store = Store(
            opening_balance=Decimal("1000"),
            created_on=DAY,
            auto_debits=(bill("200", EntryStatus.SCHEDULED),),
        )
        assert compute_totals(store).balance == Decimal("800")

    def test_breakdown_and_receipts(self):
        """Test the per-kind breakdown, expenses and receipts."""
        store = Store(
            opening_balance=Decimal("1000"),
            created_on=DAY,
            auto_debits=(bill("100"), bill("50.50")),
            payroll=(payment("300"),),
            scheduled=(payment("25"),),
            transfers_out=(
                Transfer(id=1, origin_store="A", destination_store="B", date=DAY, amount=Decimal("40")),
            ),
            receipts=(Receipt(id=2, amount=Decimal("60")),),
        )
        totals = compute_totals(store)

        assert totals.auto_debits == Decimal("150.50")
        assert totals.payroll == Decimal("300")
        assert totals.scheduled == Decimal("25")
        assert totals.transfers == Decimal("40")
        assert totals.expenses == Decimal("515.50")
        assert totals.receipts == Decimal("60")
        assert totals.balance == Decimal("544.50")

    def test_transfers_count_by_absolute_value(self):
        """Test a negative transfer amount is still an expense."""
        store = Store(
            opening_balance=Decimal("100"),
            created_on=DAY,
            transfers_out=(
                Transfer(id=1, origin_store="A", destination_store="B", date=DAY, amount=Decimal("-30")),
            ),
        )
        assert compute_totals(store).balance == Decimal("70")

    def test_archived_entries_do_not_count(self):
        """Test history entries contribute nothing to the balance."""
        store = Store(
            opening_balance=Decimal("1000"),
            created_on=DAY,
            auto_debits=(bill("10"),),
            history=StoreHistory(
                auto_debits=(bill("500"),),
                receipts=(Receipt(id=9, amount=Decimal("700")),),
            ),
        )
        totals = compute_totals(store)
        assert totals.expenses == Decimal("10")
        assert totals.receipts == Decimal("0")
        assert totals.balance == Decimal("990")

    def test_empty_store(self):
        """Test an empty store's balance is its opening balance."""
        store = Store(opening_balance=Decimal("123.45"), created_on=DAY)
        assert compute_totals(store).balance == Decimal("123.45")


class TestAggregation:
    """Tests for aggregate_items and aggregate_group."""

    def test_items_in_kind_order(self, two_stores):
        """Test live items are tagged with their kind in kind order."""
        store = Store(
            opening_balance=Decimal("0"),
            created_on=DAY,
            scheduled=(payment("5"),),
            auto_debits=(bill("1"),),
            receipts=(Receipt(id=3, amount=Decimal("2")),),
        )
        group = replace_store(two_stores, "X", store)

        items = aggregate_items(group, "X")

        assert [item.kind for item in items] == [
            EntryKind.AUTO_DEBIT,
            EntryKind.SCHEDULED,
            EntryKind.RECEIPT,
        ]
        assert all(item.store_name == "X" and not item.archived for item in items)

    def test_history_included_on_request(self, two_stores):
        """Test archived entries follow live ones with archived=True."""
        store = Store(
            opening_balance=Decimal("0"),
            created_on=DAY,
            auto_debits=(bill("1"),),
            history=StoreHistory(auto_debits=(bill("2"),)),
        )
        group = replace_store(two_stores, "X", store)

        assert len(aggregate_items(group, "X")) == 1
        items = aggregate_items(group, "X", include_history=True)
        assert [item.archived for item in items] == [False, True]
        assert items[1].entry.amount == Decimal("2")

    def test_unknown_store(self, two_stores):
        """Test aggregating an unknown store raises NotFoundError."""
        with pytest.raises(NotFoundError, match="not found"):
            aggregate_items(two_stores, "Nope")

    def test_group_in_store_order(self, two_stores):
        """Test aggregate_group walks stores in insertion order."""
        group = replace_store(
            two_stores,
            "Y",
            Store(opening_balance=Decimal("0"), created_on=DAY, auto_debits=(bill("1"),)),
        )
        group = replace_store(
            group,
            "X",
            Store(opening_balance=Decimal("0"), created_on=DAY, auto_debits=(bill("2"),)),
        )
        assert [item.store_name for item in aggregate_group(group)] == ["X", "Y"]


def test_replace_store_keeps_order(three_stores):
    """Test replacing a store does not move it to the end."""
    updated = replace_store(three_stores, "X", get_store(three_stores, "X"))
    assert list(updated.stores) == ["X", "Y", "Z"]
