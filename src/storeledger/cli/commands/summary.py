"""Summary commands."""

from decimal import Decimal

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import resolve_group_or_exit, workspace_service
from storeledger.domain.entities import PayrollCategory, Store
from storeledger.domain.errors import DomainError
from storeledger.domain.ledger import compute_totals, get_store
from storeledger.utils.amount_parser import format_brl


def _payroll_by_category(store: Store) -> dict[PayrollCategory, Decimal]:
    """Sum live payroll per category; uncategorized lines count as salary."""
    totals = {category: Decimal("0") for category in PayrollCategory}
    for line in store.payroll:
        totals[line.payroll_category or PayrollCategory.SALARIO] += line.amount
    return totals


def _display_store_detail(name: str, store: Store) -> None:
    totals = compute_totals(store)
    click.echo(f"\n{name}")
    click.echo("=" * 50)
    click.echo(f"  {'Opening balance':25s} {format_brl(store.opening_balance):>20s}")
    click.echo(f"  {'Auto-debits (DDA)':25s} {format_brl(totals.auto_debits):>20s}")
    click.echo(f"  {'Payroll':25s} {format_brl(totals.payroll):>20s}")
    for category, amount in _payroll_by_category(store).items():
        if amount:
            click.echo(f"    {category.value:23s} {format_brl(amount):>20s}")
    click.echo(f"  {'Scheduled payments':25s} {format_brl(totals.scheduled):>20s}")
    click.echo(f"  {'Transfers out':25s} {format_brl(totals.transfers):>20s}")
    click.echo("-" * 50)
    click.echo(f"  {'Expenses':25s} {format_brl(totals.expenses):>20s}")
    click.echo(f"  {'Receipts':25s} {format_brl(totals.receipts):>20s}")
    click.echo(f"  {'Balance':25s} {format_brl(totals.balance):>20s}")


@click.command("summary")
@click.option("--store", help="Show the detailed breakdown of one store")
@click.pass_context
def summary(ctx, store: str | None):
    """Show opening balance, expenses, receipts and balance per store."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    group = service.get_group(group_name)

    if store is not None:
        try:
            _display_store_detail(store, get_store(group, store))
        except DomainError as e:
            handle_domain_error(ctx, e)
        return

    if not group.stores:
        click.echo("No stores found.")
        return

    click.echo(f"\nSummary for '{group_name}':")
    click.echo("-" * 100)
    click.echo(
        f"{'Store':<25} {'Opening':>18} {'Expenses':>18} {'Receipts':>18} {'Balance':>18}"
    )
    click.echo("-" * 100)

    grand = Decimal("0")
    for name, store_obj in group.stores.items():
        totals = compute_totals(store_obj)
        grand += totals.balance
        click.echo(
            f"{name:<25} {format_brl(store_obj.opening_balance):>18} "
            f"{format_brl(totals.expenses):>18} {format_brl(totals.receipts):>18} "
            f"{format_brl(totals.balance):>18}"
        )
    click.echo("-" * 100)
    click.echo(f"{'Total':<25} {'':>18} {'':>18} {'':>18} {format_brl(grand):>18}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
