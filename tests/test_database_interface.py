"""Tests for Database interface returning domain models."""

import json

import pytest
from datetime import date
from decimal import Decimal

from storeledger.database.base import Database
from storeledger.database.models import LedgerDocument
from storeledger.domain import entities


class TestDatabaseInterface:
    """Tests to verify Database interface stores and returns domain models."""

    def test_is_database(self, temp_db):
        """Test the SQLite factory returns a Database implementation."""
        assert isinstance(temp_db, Database)

    def test_load_missing_operator(self, temp_db):
        """Test an unknown operator has an empty Groups map."""
        assert temp_db.load_groups("nobody") == {}

    def test_save_and_load_returns_domain_models(self, temp_db, two_stores):
        """Test saved groups come back as domain Group entities."""
        temp_db.save_groups("op", {"Centro": two_stores})

        groups = temp_db.load_groups("op")

        assert isinstance(groups["Centro"], entities.Group)
        assert isinstance(groups["Centro"].stores["X"], entities.Store)
        assert groups["Centro"].stores["X"].opening_balance == Decimal("1000")

    def test_save_replaces_document(self, temp_db, two_stores):
        """Test the last write wins."""
        temp_db.save_groups("op", {"A": two_stores})
        temp_db.save_groups("op", {"B": entities.Group()})

        assert list(temp_db.load_groups("op")) == ["B"]

    def test_document_is_json(self, temp_db, two_stores):
        """Test the stored row holds a JSON document and who wrote it."""
        temp_db.save_groups("op", {"Centro": two_stores}, updated_by="maria")

        row = temp_db._get_session().get(LedgerDocument, "op")
        assert json.loads(row.data)["Centro"]["stores"]["Y"]["opening_balance"] == "500"
        assert row.last_updated_by == "maria"
        assert row.updated_at is not None

    def test_daily_check_marker(self, temp_db):
        """Test the daily check date is stored per operator."""
        assert temp_db.get_last_daily_check("op") is None

        temp_db.set_last_daily_check("op", date(2024, 5, 10))
        temp_db.set_last_daily_check("op", date(2024, 5, 11))

        assert temp_db.get_last_daily_check("op") == date(2024, 5, 11)
        assert temp_db.get_last_daily_check("other") is None

    def test_persists_across_connections(self, temp_db, two_stores):
        """Test data survives disconnecting and reconnecting."""
        from storeledger.database.factories import create_sqlite_database

        temp_db.save_groups("op", {"Centro": two_stores})
        temp_db.disconnect()

        reopened = create_sqlite_database(database_path=temp_db.database_path)
        assert reopened.load_groups("op") == {"Centro": two_stores}
        reopened.disconnect()
