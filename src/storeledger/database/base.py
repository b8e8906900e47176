"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from storeledger.domain.entities import Group


class Database(ABC):
    """Abstract database interface for storeledger.

    The whole Groups map of an operator is loaded and saved as one unit;
    the last save wins.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger document operations
    @abstractmethod
    def load_groups(self, operator_id: str) -> dict[str, Group]:
        """Load an operator's Groups map. Returns an empty dict if none is stored."""
        pass

    @abstractmethod
    def save_groups(
        self, operator_id: str, groups: dict[str, Group], updated_by: Optional[str] = None
    ) -> None:
        """Replace an operator's stored Groups map."""
        pass

    # Daily check bookkeeping
    @abstractmethod
    def get_last_daily_check(self, operator_id: str) -> Optional[date]:
        """Get the last day the daily-clear prompt was handled."""
        pass

    @abstractmethod
    def set_last_daily_check(self, operator_id: str, day: date) -> None:
        """Record the day the daily-clear prompt was handled."""
        pass
