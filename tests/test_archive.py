"""Tests for archival (daily clear)."""

import logging

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from storeledger.domain.archive import clear_group, clear_store, has_any_live_entries
from storeledger.domain.entities import (
    AutoDebit,
    EntryKind,
    PaymentMethod,
    Receipt,
    ScheduledPayment,
    StoreHistory,
    Transfer,
)
from storeledger.domain.errors import NotFoundError
from storeledger.domain.ledger import compute_totals, get_store, replace_store
from storeledger.domain.transfer import create_or_update_transfer

DAY = date(2024, 5, 10)


def with_transfer(group, origin="X", destination="Y", amount="300", transfer_id=1000):
    return create_or_update_transfer(
        group,
        Transfer(
            id=0,
            origin_store=origin,
            destination_store=destination,
            date=DAY,
            amount=Decimal(amount),
        ),
        id_factory=lambda: transfer_id,
    )


def bill(name, amount="10"):
    return AutoDebit(beneficiary=name, document_id="", due_date=DAY, amount=Decimal(amount))


def pay(name, amount="10"):
    return ScheduledPayment(payee=name, method=PaymentMethod.PIX, amount=Decimal(amount), date=DAY)


class TestClearStore:
    """Tests for clear_store."""

    def test_transfer_and_receipt_archived_together(self, two_stores):
        """Test clearing X archives its transfer and Y's receipt."""
        group = clear_store(with_transfer(two_stores), "X")
        x, y = group.stores["X"], group.stores["Y"]

        assert not x.has_live_entries()
        assert len(x.history.transfers_out) == 1
        assert x.history.transfers_out[0].amount == Decimal("300")
        assert y.history.receipts == (Receipt(id=1000, amount=Decimal("300")),)
        assert y.receipts == ()

    def test_every_entry_moves_in_order(self, two_stores):
        """Test live entries are appended unchanged to history, in order."""
        store = replace(
            two_stores.stores["X"],
            auto_debits=(bill("a"), bill("b")),
            payroll=(pay("p1"),),
            scheduled=(pay("s1"), pay("s2")),
            history=StoreHistory(auto_debits=(bill("old"),)),
        )
        group = clear_store(replace_store(two_stores, "X", store), "X")
        cleared = group.stores["X"]

        for kind in EntryKind:
            assert cleared.entries(kind) == ()
        assert [d.beneficiary for d in cleared.history.auto_debits] == ["old", "a", "b"]
        assert cleared.history.payroll == store.payroll
        assert cleared.history.scheduled == store.scheduled
        assert cleared.opening_balance == store.opening_balance
        assert cleared.created_on == store.created_on

    def test_incoming_receipts_of_cleared_store_archived(self, two_stores):
        """Test the cleared store's own receipts move to its history."""
        group = clear_store(with_transfer(two_stores), "Y")

        assert group.stores["Y"].receipts == ()
        assert [r.id for r in group.stores["Y"].history.receipts] == [1000]
        # The origin side is untouched until X is cleared.
        assert [t.id for t in group.stores["X"].transfers_out] == [1000]

    def test_other_stores_keep_live_entries(self, two_stores):
        """Test clearing one store leaves unrelated entries live."""
        group = replace_store(
            two_stores, "Y", replace(two_stores.stores["Y"], auto_debits=(bill("y"),))
        )
        group = clear_store(group, "X")
        assert len(group.stores["Y"].auto_debits) == 1

    def test_keeps_store_order(self, three_stores):
        """Test clearing does not reorder stores."""
        group = clear_store(with_transfer(three_stores, "Z", "X"), "Z")
        assert list(group.stores) == ["X", "Y", "Z"]

    def test_unknown_store(self, two_stores):
        """Test clearing an unknown store raises NotFoundError."""
        with pytest.raises(NotFoundError):
            clear_store(two_stores, "Nope")

    def test_missing_receipt_is_logged(self, two_stores, caplog):
        """Test a transfer without a receipt is archived and a warning logged."""
        group = with_transfer(two_stores)
        group = replace_store(group, "Y", replace(group.stores["Y"], receipts=()))

        with caplog.at_level(logging.WARNING, logger="storeledger.domain.archive"):
            cleared = clear_store(group, "X")

        assert [t.id for t in cleared.stores["X"].history.transfers_out] == [1000]
        assert "No receipt for transfer 1000" in caplog.text

    def test_missing_destination_store_is_logged(self, two_stores, caplog):
        """Test a transfer to a vanished store is archived and a warning logged."""
        store = replace(
            two_stores.stores["X"],
            transfers_out=(
                Transfer(
                    id=7, origin_store="X", destination_store="Gone", date=DAY, amount=Decimal("5")
                ),
            ),
        )
        group = replace_store(two_stores, "X", store)

        with caplog.at_level(logging.WARNING, logger="storeledger.domain.archive"):
            cleared = clear_store(group, "X")

        assert len(cleared.stores["X"].history.transfers_out) == 1
        assert "missing store 'Gone'" in caplog.text


class TestClearGroup:
    """Tests for clear_group."""

    def test_pairs_archived_together(self, three_stores):
        """Test a group clear never leaves one side of a pair live."""
        group = with_transfer(three_stores, "X", "Y", transfer_id=1)
        group = with_transfer(group, "Y", "Z", amount="50", transfer_id=2)
        cleared = clear_group(group)

        assert [t.id for t in cleared.stores["X"].history.transfers_out] == [1]
        assert [r.id for r in cleared.stores["Y"].history.receipts] == [1]
        assert [t.id for t in cleared.stores["Y"].history.transfers_out] == [2]
        assert [r.id for r in cleared.stores["Z"].history.receipts] == [2]
        assert not has_any_live_entries(cleared)

    def test_receipts_keep_destination_order(self, three_stores):
        """Test receipts are archived in the order the destination received them."""
        group = with_transfer(three_stores, "Z", "Y", amount="20", transfer_id=200)
        group = with_transfer(group, "X", "Y", amount="10", transfer_id=100)
        assert [r.id for r in group.stores["Y"].receipts] == [200, 100]

        cleared = clear_group(group)

        assert [r.id for r in cleared.stores["Y"].history.receipts] == [200, 100]

    def test_balances_return_to_opening(self, two_stores):
        """Test every balance equals the opening balance after a clear."""
        cleared = clear_group(with_transfer(two_stores))
        for store in cleared.stores.values():
            assert compute_totals(store).balance == store.opening_balance

    def test_empty_group(self, two_stores):
        """Test clearing a group without entries keeps it equal."""
        assert clear_group(two_stores) == two_stores


class TestHasAnyLiveEntries:
    """Tests for has_any_live_entries."""

    def test_empty(self, two_stores):
        """Test a group with empty stores has no live entries."""
        assert has_any_live_entries(two_stores) is False

    def test_receipt_only(self, two_stores):
        """Test a lone receipt counts as a live entry."""
        store = replace(
            get_store(two_stores, "Y"), receipts=(Receipt(id=1, amount=Decimal("1")),)
        )
        assert has_any_live_entries(replace_store(two_stores, "Y", store)) is True

