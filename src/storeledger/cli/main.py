"""Main CLI entry point."""

import logging

import click
from storeledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from storeledger.cli.commands import (
    add,
    backup,
    daily_check,
    entries,
    group,
    rule,
    store,
    summary,
    supplier,
    transfer,
    view,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides STORELEDGER_DB_PATH environment variable)",
    envvar="STORELEDGER_DB_PATH",
)
@click.option(
    "--operator",
    default="default",
    show_default=True,
    help="Operator whose ledger is used",
    envvar="STORELEDGER_OPERATOR",
)
@click.option(
    "--group",
    "group_name",
    help="Group to work on (optional when only one group exists)",
    envvar="STORELEDGER_GROUP",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, operator: str, group_name: str | None, verbose: bool):
    """Storeledger - Payables ledger for a group of retail stores.

    Track auto-debit bills, payroll and scheduled payments per store, move
    money between stores with paired transfers and archive the day's
    entries once they are settled.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.obj["operator"] = operator
    ctx.obj["group"] = group_name

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
group.register_commands(cli)
store.register_commands(cli)
add.register_commands(cli)
entries.register_commands(cli)
transfer.register_commands(cli)
rule.register_commands(cli)
supplier.register_commands(cli)
summary.register_commands(cli)
view.register_commands(cli)
daily_check.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
