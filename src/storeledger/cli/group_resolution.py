"""CLI helpers for group resolution and shared option parsing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click
from storeledger.domain.entities import EntryKind
from storeledger.domain.workspace import WorkspaceService
from storeledger.utils.amount_parser import parse_amount
from storeledger.utils.date_parser import parse_date

# Kind labels accepted on the command line
KIND_CHOICES = {kind.label: kind for kind in EntryKind}


def workspace_service(ctx: click.Context) -> WorkspaceService:
    """Build the workspace service for the operator selected on the CLI."""
    return WorkspaceService(ctx.obj["db"], ctx.obj["operator"])


def resolve_group_or_exit(ctx: click.Context, service: WorkspaceService) -> str:
    """Resolve the group to work on, or exit with a CLI error.

    The ``--group`` option wins; without it the operator's only group is used.
    """
    groups = service.list_groups()
    name = ctx.obj.get("group")
    if name is not None:
        if name not in groups:
            click.echo(f"Error: Group '{name}' not found", err=True)
            ctx.exit(1)
        return name

    if not groups:
        click.echo(
            "Error: No groups found. Create one with 'storeledger group create NAME'.",
            err=True,
        )
        ctx.exit(1)
    if len(groups) > 1:
        click.echo(
            f"Error: {len(groups)} groups exist ({', '.join(groups)}); choose one with --group.",
            err=True,
        )
        ctx.exit(1)
    return next(iter(groups))


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def selection_or_exit(
    ctx: click.Context, entries: tuple, numbers: tuple[int, ...], select_all: bool
) -> frozenset[int]:
    """Turn 1-based entry numbers (or --all) into a set of 0-based indices."""
    if select_all:
        return frozenset(range(len(entries)))
    if not numbers:
        click.echo("Error: Select entries with --index/-i or --all", err=True)
        ctx.exit(1)
    for number in numbers:
        if not 1 <= number <= len(entries):
            click.echo(
                f"Error: No entry #{number} (there are {len(entries)})", err=True
            )
            ctx.exit(1)
    return frozenset(number - 1 for number in numbers)
