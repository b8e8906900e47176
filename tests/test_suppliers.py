"""Tests for the supplier directory and payroll import merging."""

import pytest
from datetime import date
from decimal import Decimal

from storeledger.domain.entities import (
    EntryStatus,
    PaymentMethod,
    PayrollCategory,
    ScheduledPayment,
)
from storeledger.domain.errors import NotFoundError, ValidationError
from storeledger.domain.suppliers import (
    find_supplier,
    merge_payroll_import,
    normalize_name,
    remember_payee,
    remove_supplier,
    upsert_supplier,
)

DAY = date(2024, 5, 5)


def line(name, amount="1500", pix_key=None, tax_id=None, method=PaymentMethod.BOLETO):
    return ScheduledPayment(
        payee=name,
        method=method,
        amount=Decimal(amount),
        date=DAY,
        pix_key=pix_key,
        tax_id=tax_id,
        status=EntryStatus.SCHEDULED,
        payroll_category=PayrollCategory.SALARIO,
    )


def test_normalize_name():
    """Test accents, case and spacing are ignored."""
    assert normalize_name("  José   da Conceição ") == "JOSE DA CONCEICAO"
    assert normalize_name("") == ""


class TestUpsertSupplier:
    """Tests for upsert_supplier and remove_supplier."""

    def test_add_new(self, two_stores):
        """Test a new supplier gets an id."""
        group = upsert_supplier(two_stores, "Padaria Pão Quente", tax_id="123", pix_key="pix@padaria")
        supplier = group.suppliers[0]
        assert supplier.id.startswith("sup-")
        assert supplier.name == "Padaria Pão Quente"
        assert supplier.pix_key == "pix@padaria"

    def test_names_unique_after_normalization(self, two_stores):
        """Test the same normalized name updates instead of adding."""
        group = upsert_supplier(two_stores, "José Silva", pix_key="key-1")
        group = upsert_supplier(group, "JOSE  SILVA", tax_id="999")

        assert len(group.suppliers) == 1
        assert group.suppliers[0].tax_id == "999"
        assert group.suppliers[0].pix_key == "key-1"

    def test_empty_pix_never_overwrites(self, two_stores):
        """Test an empty PIX key keeps the recorded one."""
        group = upsert_supplier(two_stores, "Ana", pix_key="ana@pix")
        same = upsert_supplier(group, "ana", pix_key="   ")
        assert same is group
        assert find_supplier(same.suppliers, "ANA").pix_key == "ana@pix"

    def test_new_pix_replaces_old(self, two_stores):
        """Test a non-empty PIX key replaces the recorded one."""
        group = upsert_supplier(two_stores, "Ana", pix_key="old")
        group = upsert_supplier(group, "Ana", pix_key="new")
        assert group.suppliers[0].pix_key == "new"

    def test_empty_name(self, two_stores):
        """Test an empty name is rejected."""
        with pytest.raises(ValidationError):
            upsert_supplier(two_stores, "  ")

    def test_remove(self, two_stores):
        """Test removing by id, and unknown ids."""
        group = upsert_supplier(two_stores, "Ana")
        supplier_id = group.suppliers[0].id
        assert remove_supplier(group, supplier_id).suppliers == ()
        with pytest.raises(NotFoundError):
            remove_supplier(group, "sup-missing")

    def test_remember_payee(self, two_stores):
        """Test saving a payment records its payee and PIX key."""
        payment = line("Fornecedor X", pix_key="fx@pix", method=PaymentMethod.PIX)
        group = remember_payee(two_stores, payment)
        assert find_supplier(group.suppliers, "fornecedor x").pix_key == "fx@pix"


class TestMergePayrollImport:
    """Tests for merge_payroll_import."""

    def test_registers_unknown_collaborators(self, two_stores):
        """Test new names are added upper-cased and counted."""
        group, stats = merge_payroll_import(
            two_stores, "X", [line("maria souza", pix_key="m@pix", tax_id="111")]
        )

        assert stats.imported == 1
        assert stats.new_suppliers == 1
        assert stats.pix_recovered == 0
        supplier = group.suppliers[0]
        assert supplier.name == "MARIA SOUZA"
        assert (supplier.tax_id, supplier.pix_key) == ("111", "m@pix")

    def test_recovers_pix_key(self, two_stores):
        """Test a line without PIX key gets the remembered one."""
        group = upsert_supplier(two_stores, "João Lima", pix_key="joao@pix", tax_id="222")
        group, stats = merge_payroll_import(group, "X", [line("JOAO LIMA")])

        assert stats.pix_recovered == 1
        assert stats.new_suppliers == 0
        payroll = group.stores["X"].payroll
        assert payroll[0].pix_key == "joao@pix"
        assert payroll[0].tax_id == "222"

    def test_directory_learns_missing_fields(self, two_stores):
        """Test the import fills fields the directory lacked."""
        group = upsert_supplier(two_stores, "Carla")
        group, stats = merge_payroll_import(group, "X", [line("carla", pix_key="c@pix")])

        assert stats.pix_recovered == 0
        assert group.suppliers[0].pix_key == "c@pix"

    def test_lines_become_open_pix(self, two_stores):
        """Test imported lines are forced to PIX and open, appended in order."""
        group, _ = merge_payroll_import(two_stores, "X", [line("A"), line("B", "200")])

        payroll = group.stores["X"].payroll
        assert [p.payee for p in payroll] == ["A", "B"]
        assert all(p.method is PaymentMethod.PIX for p in payroll)
        assert all(p.status is EntryStatus.OPEN for p in payroll)

    def test_same_name_twice_in_one_import(self, two_stores):
        """Test a repeated collaborator is registered once."""
        group, stats = merge_payroll_import(
            two_stores, "X", [line("Rita", pix_key="r@pix"), line("RITA")]
        )
        assert stats.new_suppliers == 1
        assert stats.pix_recovered == 1
        assert group.stores["X"].payroll[1].pix_key == "r@pix"

    def test_unknown_store(self, two_stores):
        """Test importing into an unknown store raises NotFoundError."""
        with pytest.raises(NotFoundError):
            merge_payroll_import(two_stores, "Nope", [line("A")])
