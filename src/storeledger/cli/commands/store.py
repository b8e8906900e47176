"""Store management commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_group_or_exit,
    workspace_service,
)
from storeledger.domain.archive import clear_group, clear_store
from storeledger.domain.errors import DomainError
from storeledger.domain.ledger import compute_totals, get_store
from storeledger.domain.stores import add_store, delete_store, rename_store, set_opening_balance
from storeledger.utils.amount_parser import format_brl


@click.group()
def store_group():
    """Manage the stores of a group."""
    pass


@store_group.command("create")
@click.argument("name", metavar="STORE_NAME")
@click.option("--balance", default="0", help="Opening balance (e.g., 'R$ 1.500,00' or 1500.00)")
@click.option("--created", default="today", help="Creation date (defaults to today)")
@click.pass_context
def create_store(ctx, name: str, balance: str, created: str):
    """Create a new store in the current group.

    Examples:
        storeledger store create "Loja 1" --balance "R$ 10.000,00"
        storeledger --group Centro store create "Loja 2"
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    opening = parse_amount_or_exit(ctx, balance)
    created_on = parse_date_or_exit(ctx, created, "creation date")

    try:
        service.update_group(group_name, lambda g: add_store(g, name, opening, created_on))
        click.echo(f"Created store '{name.strip()}' with opening balance {format_brl(opening)}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@store_group.command("list")
@click.pass_context
def list_stores(ctx):
    """List the stores of the current group with their balances."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    group = service.get_group(group_name)

    if not group.stores:
        click.echo("No stores found.")
        return

    click.echo(f"\nStores in '{group_name}':")
    click.echo("-" * 70)
    for name, store in group.stores.items():
        totals = compute_totals(store)
        click.echo(
            f"{name:25s} | Opening: {format_brl(store.opening_balance):>16s} "
            f"| Balance: {format_brl(totals.balance):>16s}"
        )


@store_group.command("rename")
@click.argument("old_name", metavar="STORE_NAME")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename(ctx, old_name: str, new_name: str) -> None:
    """Rename a store, keeping its position and its transfers."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    try:
        service.update_group(group_name, lambda g: rename_store(g, old_name, new_name))
        click.echo(f"Renamed store '{old_name}' to '{new_name.strip()}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@store_group.command("delete")
@click.argument("name", metavar="STORE_NAME")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, name: str, yes: bool) -> None:
    """Delete a store with its live entries and history."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    try:
        get_store(service.get_group(group_name), name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete store '{name}'?"):
        click.echo("Deletion cancelled.")
        return

    service.update_group(group_name, lambda g: delete_store(g, name))
    click.echo(f"Deleted store '{name}'")


@store_group.command("set-balance")
@click.argument("name", metavar="STORE_NAME")
@click.argument("balance", metavar="AMOUNT")
@click.pass_context
def set_balance(ctx, name: str, balance: str) -> None:
    """Change a store's opening balance."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    opening = parse_amount_or_exit(ctx, balance)
    try:
        service.update_group(group_name, lambda g: set_opening_balance(g, name, opening))
        click.echo(f"Opening balance of '{name}' set to {format_brl(opening)}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@store_group.command("clear")
@click.argument("name", metavar="STORE_NAME", required=False)
@click.option("--all", "clear_all", is_flag=True, help="Clear every store of the group")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear(ctx, name: str | None, clear_all: bool, yes: bool) -> None:
    """Archive the live entries of a store (or of every store with --all).

    Transfers are archived together with their receipts at the destination.
    """
    if (name is None) == (not clear_all):
        click.echo("Error: Give a STORE_NAME or --all, not both", err=True)
        ctx.exit(1)

    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    target = f"every store of '{group_name}'" if clear_all else f"store '{name}'"

    if not yes and not click.confirm(f"Archive all live entries of {target}?"):
        click.echo("Clear cancelled.")
        return

    try:
        if clear_all:
            service.update_group(group_name, clear_group)
        else:
            service.update_group(group_name, lambda g: clear_store(g, name))
        click.echo(f"Archived live entries of {target}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register store commands with main CLI."""
    cli.add_command(store_group, name="store")
