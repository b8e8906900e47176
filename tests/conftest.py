"""Shared pytest fixtures for storeledger tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from storeledger.database.factories import create_sqlite_database
from storeledger.domain.entities import Group, Store
from storeledger.domain.workspace import WorkspaceService

OPENED = date(2024, 5, 1)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def workspace_service(temp_db):
    """Create a WorkspaceService for the default operator."""
    return WorkspaceService(temp_db, "default")


@pytest.fixture
def two_stores():
    """Group with store X (balance 1000) and store Y (balance 500)."""
    return Group(
        stores={
            "X": Store(opening_balance=Decimal("1000"), created_on=OPENED),
            "Y": Store(opening_balance=Decimal("500"), created_on=OPENED),
        }
    )


@pytest.fixture
def three_stores(two_stores):
    """The two-store group plus an empty store Z."""
    stores = dict(two_stores.stores)
    stores["Z"] = Store(opening_balance=Decimal("0"), created_on=OPENED)
    return Group(stores=stores)


@pytest.fixture
def sample_group(workspace_service):
    """Create a persisted group 'Centro' with stores 'Loja 1' and 'Loja 2'."""
    from storeledger.domain.stores import add_store

    workspace_service.create_group("Centro")
    workspace_service.update_group(
        "Centro", lambda g: add_store(g, "Loja 1", Decimal("1000"), OPENED)
    )
    workspace_service.update_group(
        "Centro", lambda g: add_store(g, "Loja 2", Decimal("500"), OPENED)
    )
    return "Centro"


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
