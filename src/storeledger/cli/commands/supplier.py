"""Supplier directory commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import resolve_group_or_exit, workspace_service
from storeledger.domain.errors import DomainError
from storeledger.domain.suppliers import find_supplier, remove_supplier, upsert_supplier


@click.group()
def supplier_group():
    """Manage the group's supplier and collaborator directory."""
    pass


@supplier_group.command("add")
@click.argument("name")
@click.option("--tax-id", help="CPF/CNPJ")
@click.option("--pix-key", help="PIX key")
@click.pass_context
def add(ctx, name: str, tax_id: str | None, pix_key: str | None):
    """Add a supplier, or update the one with the same name.

    Names are compared without accents, case or extra spaces. A PIX key or
    tax id already on record is kept when none is given.
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    existed = find_supplier(service.get_group(group_name).suppliers, name) is not None
    try:
        group = service.update_group(
            group_name, lambda g: upsert_supplier(g, name, tax_id=tax_id, pix_key=pix_key)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    supplier = find_supplier(group.suppliers, name)
    verb = "Updated" if existed else "Added"
    click.echo(f"{verb} supplier '{supplier.name}' (ID: {supplier.id})")


@supplier_group.command("list")
@click.pass_context
def list_suppliers(ctx):
    """List suppliers."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    suppliers = service.get_group(group_name).suppliers
    if not suppliers:
        click.echo("No suppliers found.")
        return

    click.echo("\nSuppliers:")
    click.echo("-" * 90)
    for s in sorted(suppliers, key=lambda s: s.name.upper()):
        click.echo(
            f"{s.id:16s} | {s.name:30s} | Tax ID: {s.tax_id or '-':18s} | PIX: {s.pix_key or '-'}"
        )


@supplier_group.command("delete")
@click.argument("supplier_id")
@click.pass_context
def delete(ctx, supplier_id: str):
    """Delete a supplier by ID."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    try:
        service.update_group(group_name, lambda g: remove_supplier(g, supplier_id))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted supplier {supplier_id}")


def register_commands(cli):
    """Register supplier commands with main CLI."""
    cli.add_command(supplier_group, name="supplier")
