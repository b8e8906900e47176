"""Group management commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import workspace_service
from storeledger.domain.errors import DomainError


@click.group()
def group_group():
    """Manage store groups."""
    pass


@group_group.command("create")
@click.argument("name", metavar="GROUP_NAME")
@click.pass_context
def create_group(ctx, name: str):
    """Create a new, empty group.

    Examples:
        storeledger group create "Centro"
    """
    service = workspace_service(ctx)
    try:
        service.create_group(name)
        click.echo(f"Created group '{name.strip()}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List all groups."""
    service = workspace_service(ctx)
    groups = service.list_groups()
    if not groups:
        click.echo("No groups found.")
        return

    click.echo("\nGroups:")
    click.echo("-" * 60)
    for name, group in groups.items():
        click.echo(
            f"{name:30s} | Stores: {len(group.stores):3d} | Suppliers: {len(group.suppliers):3d}"
        )


@group_group.command("rename")
@click.argument("old_name", metavar="GROUP_NAME")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_group(ctx, old_name: str, new_name: str) -> None:
    """Rename a group."""
    service = workspace_service(ctx)
    try:
        service.rename_group(old_name, new_name)
        click.echo(f"Renamed group '{old_name}' to '{new_name.strip()}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@group_group.command("delete")
@click.argument("name", metavar="GROUP_NAME")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_group(ctx, name: str, yes: bool) -> None:
    """Delete a group with all its stores, history and suppliers."""
    service = workspace_service(ctx)
    try:
        group = service.get_group(name)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete group '{name}' and its {len(group.stores)} store(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_group(name)
    click.echo(f"Deleted group '{name}'")


def register_commands(cli):
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
