"""Backup and restore commands."""

import json

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import workspace_service
from storeledger.domain.errors import DomainError


@click.group()
def backup_group():
    """Export or restore the whole ledger as JSON."""
    pass


@backup_group.command("export")
@click.argument("output", type=click.Path(dir_okay=False), default="-")
@click.pass_context
def export(ctx, output: str):
    """Write every group to OUTPUT (stdout by default)."""
    service = workspace_service(ctx)
    document = service.export_document()
    text = json.dumps(document, ensure_ascii=False, indent=2)
    if output == "-":
        click.echo(text)
        return

    with open(output, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    click.echo(f"Exported {len(document)} group(s) to {output}")


@backup_group.command("restore")
@click.argument("input_file", metavar="FILE", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def restore(ctx, input_file: str, yes: bool):
    """Replace every group with the content of a backup FILE.

    Older exports with Portuguese keys ('lojas', 'saldoInicial', ...) are
    accepted too.
    """
    service = workspace_service(ctx)
    try:
        with open(input_file, "r", encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: {input_file} is not valid JSON: {e}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm("This replaces every group of the current operator. Continue?"):
        click.echo("Restore cancelled.")
        return

    try:
        groups = service.restore_document(document)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored {len(groups)} group(s)")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
