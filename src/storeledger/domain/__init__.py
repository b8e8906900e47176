"""Domain layer for storeledger application.

The ledger core (entities, totals, transfers, archival, bulk operations and
alert rules) is pure; ``WorkspaceService`` in ``storeledger.domain.workspace``
binds it to a database.
"""

from storeledger.domain.archive import clear_group, clear_store, has_any_live_entries
from storeledger.domain.alerts import match_rule
from storeledger.domain.bulk import (
    delete_selected,
    recategorize_selected,
    reopen_selected,
    schedule_selected,
)
from storeledger.domain.ledger import aggregate_items, compute_totals
from storeledger.domain.transfer import create_or_update_transfer, delete_transfer

__all__ = [
    "aggregate_items",
    "clear_group",
    "clear_store",
    "compute_totals",
    "create_or_update_transfer",
    "delete_selected",
    "delete_transfer",
    "has_any_live_entries",
    "match_rule",
    "recategorize_selected",
    "reopen_selected",
    "schedule_selected",
]
