"""Transactions view command."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import describe_entry, short_date
from storeledger.cli.group_resolution import (
    KIND_CHOICES,
    parse_date_or_exit,
    resolve_group_or_exit,
    workspace_service,
)
from storeledger.domain.entities import EntryStatus
from storeledger.domain.errors import DomainError
from storeledger.domain.ledger import aggregate_group, aggregate_items
from storeledger.domain.view import filter_items, item_date, net_total
from storeledger.utils.amount_parser import format_brl


@click.command("view")
@click.option("--store", help="Only this store")
@click.option("--kind", type=click.Choice(list(KIND_CHOICES)), help="Only this kind of entry")
@click.option(
    "--status",
    type=click.Choice([s.value for s in EntryStatus]),
    help="Only entries in this status (receipts count as scheduled)",
)
@click.option("--start-date", help="Start date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--end-date", help="End date (YYYY-MM-DD or DD/MM/YYYY)")
@click.option("--search", help="Text to look for in names, documents and amounts")
@click.option("--history", is_flag=True, help="Include archived entries")
@click.pass_context
def view_entries(
    ctx,
    store: str | None,
    kind: str | None,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    search: str | None,
    history: bool,
):
    """View every entry of the group with optional filters.

    The net total adds receipts and subtracts everything else.
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    group = service.get_group(group_name)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        if store is not None:
            items = aggregate_items(group, store, include_history=history)
        else:
            items = aggregate_group(group, include_history=history)
    except DomainError as e:
        handle_domain_error(ctx, e)

    items = filter_items(
        items,
        group,
        kind=KIND_CHOICES[kind] if kind else None,
        status=EntryStatus(status) if status else None,
        start_date=start,
        end_date=end,
        search=search,
    )

    if not items:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(items)} entr{'y' if len(items) == 1 else 'ies'}:")
    click.echo("-" * 110)
    for item in items:
        archived = " (archived)" if item.archived else ""
        when = short_date(item_date(item, group))
        click.echo(
            f"{item.store_name:<18} {item.kind.label:<10} {when:<10} "
            f"{describe_entry(item.entry)}{archived}"
        )
    click.echo("-" * 110)
    click.echo(f"Net total: {format_brl(net_total(items))}")


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_entries)
