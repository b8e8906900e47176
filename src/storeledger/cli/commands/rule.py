"""Alert rule commands."""

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import short_date
from storeledger.cli.group_resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_group_or_exit,
    workspace_service,
)
from storeledger.domain.alerts import add_rule, remove_rule
from storeledger.domain.entities import AlertRule
from storeledger.domain.errors import DomainError
from storeledger.utils.amount_parser import format_brl


@click.group()
def rule_group():
    """Manage payment alert rules."""
    pass


@rule_group.command("add")
@click.option("--message", required=True, help="Warning shown when the rule matches")
@click.option("--term", help="Text found in the payee/beneficiary or description")
@click.option("--document", help="CNPJ/CPF or document number (digits compared)")
@click.option("--amount", help="Amount, matched within one cent")
@click.option("--due", help="Exact due/payment date")
@click.option("--recurring", is_flag=True, help="Mark the rule as recurring")
@click.pass_context
def add(
    ctx,
    message: str,
    term: str | None,
    document: str | None,
    amount: str | None,
    due: str | None,
    recurring: bool,
):
    """Add an alert rule; every criterion given must match.

    Examples:
        storeledger rule add --message "Check the contract first" --document 11.222.333/0001-44
        storeledger rule add --message "Duplicate rent?" --term aluguel --amount 3500
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    rule = AlertRule(
        id="",
        message=message.strip(),
        term=term,
        document_id=document,
        amount=parse_amount_or_exit(ctx, amount) if amount is not None else None,
        due_date=parse_date_or_exit(ctx, due, "due date") if due is not None else None,
        is_recurring=recurring,
    )

    try:
        group = service.update_group(group_name, lambda g: add_rule(g, rule))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added alert rule {group.alert_rules[-1].id}")


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List alert rules in match order."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    rules = service.get_group(group_name).alert_rules
    if not rules:
        click.echo("No alert rules found.")
        return

    click.echo("\nAlert rules:")
    click.echo("-" * 80)
    for rule in rules:
        criteria = []
        if rule.term:
            criteria.append(f"term={rule.term}")
        if rule.document_id:
            criteria.append(f"document={rule.document_id}")
        if rule.amount is not None:
            criteria.append(f"amount={format_brl(rule.amount)}")
        if rule.due_date is not None:
            criteria.append(f"date={short_date(rule.due_date)}")
        recurring = " (recurring)" if rule.is_recurring else ""
        click.echo(f"{rule.id} | {rule.message}{recurring} | {', '.join(criteria)}")


@rule_group.command("delete")
@click.argument("rule_id")
@click.pass_context
def delete(ctx, rule_id: str):
    """Delete an alert rule."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    try:
        service.update_group(group_name, lambda g: remove_rule(g, rule_id))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted alert rule {rule_id}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
