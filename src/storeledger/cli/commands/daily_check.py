"""Daily clear command."""

import click
from storeledger.cli.group_resolution import parse_date_or_exit, workspace_service


@click.command("daily-check")
@click.option("--yes", is_flag=True, help="Clear without asking")
@click.option("--date", "when", default="today", hidden=True)
@click.pass_context
def daily_check(ctx, yes: bool, when: str):
    """Offer to archive every group's live entries once a day.

    The prompt is shown at most once per day, and only while some store
    still has live entries. Declining also counts as today's check.
    """
    service = workspace_service(ctx)
    today = parse_date_or_exit(ctx, when)

    if not service.daily_check_due(today):
        click.echo("Daily check already done, or nothing to clear.")
        return

    confirmed = yes or click.confirm(
        "Clear the live entries of every store in every group? They move to history."
    )
    cleared = service.run_daily_clear(today, confirmed)
    if cleared is None:
        click.echo("Nothing cleared. You will be asked again tomorrow.")
    else:
        click.echo(f"Cleared {cleared} group(s).")


def register_commands(cli):
    """Register daily-check command with main CLI."""
    cli.add_command(daily_check)
