"""Workspace domain service: an operator's groups, loaded and saved as one unit."""

import logging
from datetime import date
from typing import Any, Callable, Optional

from storeledger.database.base import Database
from storeledger.database.mappers import groups_from_document, groups_to_document
from storeledger.domain.archive import clear_group, has_any_live_entries
from storeledger.domain.entities import Group
from storeledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_group,
    group_not_found,
)

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Service for managing an operator's groups.

    Every change loads the current Groups map, applies a pure transform and
    saves the result; the core never edits a stored Group in place.
    """

    def __init__(self, db: Database, operator_id: str):
        """Initialize workspace service.

        Args:
            db: Database instance
            operator_id: Operator whose document is read and written
        """
        self.db = db
        self.operator_id = operator_id

    def list_groups(self) -> dict[str, Group]:
        """Return the operator's groups in their stored order."""
        return self.db.load_groups(self.operator_id)

    def get_group(self, name: str) -> Group:
        """Get a group by name.

        Raises:
            NotFoundError: If the group does not exist
        """
        groups = self.list_groups()
        if name not in groups:
            raise NotFoundError(group_not_found(name))
        return groups[name]

    def _save(self, groups: dict[str, Group]) -> None:
        self.db.save_groups(self.operator_id, groups, updated_by=self.operator_id)

    def create_group(self, name: str) -> None:
        """Create an empty group.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the group already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Group name cannot be empty")
        groups = self.list_groups()
        if name in groups:
            raise ConflictError(duplicate_group(name))
        groups[name] = Group()
        self._save(groups)

    def rename_group(self, old_name: str, new_name: str) -> None:
        """Rename a group, keeping its position.

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If the new name is empty
            ConflictError: If the new name is taken
        """
        groups = self.list_groups()
        if old_name not in groups:
            raise NotFoundError(group_not_found(old_name))
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Group name cannot be empty")
        if new_name == old_name:
            return
        if new_name in groups:
            raise ConflictError(duplicate_group(new_name))
        self._save({new_name if k == old_name else k: v for k, v in groups.items()})

    def delete_group(self, name: str) -> None:
        """Delete a group and everything in it."""
        groups = self.list_groups()
        if name not in groups:
            raise NotFoundError(group_not_found(name))
        del groups[name]
        self._save(groups)

    def save_group(self, name: str, group: Group) -> None:
        """Store a new value for an existing group."""
        groups = self.list_groups()
        if name not in groups:
            raise NotFoundError(group_not_found(name))
        groups[name] = group
        self._save(groups)

    def update_group(self, name: str, transform: Callable[[Group], Group]) -> Group:
        """Apply a pure transform to a group and save the result.

        If the transform raises, nothing is saved.

        Returns:
            The new group value
        """
        groups = self.list_groups()
        if name not in groups:
            raise NotFoundError(group_not_found(name))
        updated = transform(groups[name])
        groups[name] = updated
        self._save(groups)
        return updated

    def clear_all_groups(self) -> int:
        """Archive the live entries of every store in every group.

        Returns:
            Number of groups cleared
        """
        groups = {name: clear_group(group) for name, group in self.list_groups().items()}
        self._save(groups)
        logger.info("Cleared %d group(s) for operator '%s'", len(groups), self.operator_id)
        return len(groups)

    def daily_check_due(self, today: date) -> bool:
        """Return True if the daily-clear prompt should be shown today.

        It is due when the prompt was not handled today and some store of
        some group has live entries.
        """
        if self.db.get_last_daily_check(self.operator_id) == today:
            return False
        return any(has_any_live_entries(group) for group in self.list_groups().values())

    def run_daily_clear(self, today: date, confirmed: bool) -> Optional[int]:
        """Record today's check, clearing every group first if confirmed.

        The day is marked as handled whether or not the clear was confirmed.

        Returns:
            Number of groups cleared, or None if not confirmed
        """
        cleared = self.clear_all_groups() if confirmed else None
        self.db.set_last_daily_check(self.operator_id, today)
        return cleared

    def export_document(self) -> dict[str, Any]:
        """Return the whole Groups map as a JSON-serializable document."""
        return groups_to_document(self.list_groups())

    def restore_document(self, document: Any) -> dict[str, Group]:
        """Replace every group with the content of a backup document.

        Legacy exports are accepted. The document is fully decoded before
        anything is saved.

        Raises:
            ValidationError: If the document cannot be decoded
        """
        try:
            groups = groups_from_document(document)
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid backup document: {e}")
        self._save(groups)
        return groups
