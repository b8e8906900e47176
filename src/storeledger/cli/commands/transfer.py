"""Inter-store transfer commands."""

from dataclasses import replace

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import describe_entry
from storeledger.cli.group_resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_group_or_exit,
    workspace_service,
)
from storeledger.domain.entities import Transfer
from storeledger.domain.errors import DomainError, transfer_not_found
from storeledger.domain.transfer import create_or_update_transfer, delete_transfer, find_transfer


@click.group()
def transfer_group():
    """Move money between the stores of a group."""
    pass


@transfer_group.command("create")
@click.option("--from", "origin", required=True, help="Store the money leaves")
@click.option("--to", "destination", required=True, help="Store that receives it")
@click.option("--amount", required=True, help="Amount transferred")
@click.option("--date", "when", default="today", help="Transfer date (defaults to today)")
@click.option("--description", default="", help="Description")
@click.pass_context
def create(ctx, origin: str, destination: str, amount: str, when: str, description: str):
    """Create a transfer and the matching receipt at the destination.

    Examples:
        storeledger transfer create --from "Loja 1" --to "Loja 2" --amount 500
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    transfer = Transfer(
        id=0,
        origin_store=origin,
        destination_store=destination,
        date=parse_date_or_exit(ctx, when),
        amount=parse_amount_or_exit(ctx, amount),
        description=description,
    )

    before = service.get_group(group_name)
    try:
        group = service.update_group(group_name, lambda g: create_or_update_transfer(g, transfer))
    except DomainError as e:
        handle_domain_error(ctx, e)

    known = {t.id for store in before.stores.values() for t in store.transfers_out}
    created = next(t for t in group.stores[origin].transfers_out if t.id not in known)
    click.echo(f"Created transfer #{created.id}: {describe_entry(created)}")


@transfer_group.command("edit")
@click.argument("transfer_id", type=int)
@click.option("--from", "origin", help="New origin store")
@click.option("--to", "destination", help="New destination store")
@click.option("--amount", help="New amount")
@click.option("--date", "when", help="New date")
@click.option("--description", help="New description")
@click.pass_context
def edit(
    ctx,
    transfer_id: int,
    origin: str | None,
    destination: str | None,
    amount: str | None,
    when: str | None,
    description: str | None,
):
    """Edit a live transfer; its receipt follows it to the new destination."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    current = find_transfer(service.get_group(group_name), transfer_id)
    if current is None:
        click.echo(f"Error: {transfer_not_found(transfer_id)}", err=True)
        ctx.exit(1)

    changes = {}
    if origin is not None:
        changes["origin_store"] = origin
    if destination is not None:
        changes["destination_store"] = destination
    if amount is not None:
        changes["amount"] = parse_amount_or_exit(ctx, amount)
    if when is not None:
        changes["date"] = parse_date_or_exit(ctx, when)
    if description is not None:
        changes["description"] = description
    updated = replace(current, **changes)

    try:
        service.update_group(
            group_name,
            lambda g: create_or_update_transfer(g, updated, previous_id=transfer_id),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transfer #{transfer_id}: {describe_entry(updated)}")


@transfer_group.command("delete")
@click.argument("transfer_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, transfer_id: int, yes: bool):
    """Delete a transfer together with its receipt."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    current = find_transfer(service.get_group(group_name), transfer_id)
    if current is None:
        click.echo(f"Error: {transfer_not_found(transfer_id)}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete transfer #{transfer_id} and its receipt?"):
        click.echo("Deletion cancelled.")
        return

    service.update_group(group_name, lambda g: delete_transfer(g, transfer_id))
    click.echo(f"Deleted transfer #{transfer_id}")


@transfer_group.command("list")
@click.option("--store", help="Only transfers leaving or reaching this store")
@click.pass_context
def list_transfers(ctx, store: str | None):
    """List live transfers."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    group = service.get_group(group_name)

    transfers = [
        t
        for s in group.stores.values()
        for t in s.transfers_out
        if store is None or store in (t.origin_store, t.destination_store)
    ]
    if not transfers:
        click.echo("No transfers found.")
        return

    click.echo(f"\nFound {len(transfers)} transfer(s):")
    click.echo("-" * 90)
    for transfer in transfers:
        click.echo(describe_entry(transfer))


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
