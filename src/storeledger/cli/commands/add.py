"""Commands that add bills and payments to a store."""

import csv

import click
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.group_resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_group_or_exit,
    workspace_service,
)
from storeledger.domain.alerts import match_rule
from storeledger.domain.entities import (
    AutoDebit,
    EntryKind,
    PaymentMethod,
    PayrollCategory,
    ScheduledPayment,
)
from storeledger.domain.errors import DomainError
from storeledger.domain.stores import add_entries
from storeledger.domain.suppliers import find_supplier, merge_payroll_import, remember_payee
from storeledger.utils.amount_parser import format_brl, parse_amount
from storeledger.utils.date_parser import parse_date

METHOD_CHOICES = {method.value.lower(): method for method in PaymentMethod}
CATEGORY_CHOICES = {
    "salario": PayrollCategory.SALARIO,
    "adiantamento": PayrollCategory.ADIANTAMENTO,
    "gratificacao": PayrollCategory.GRATIFICACAO,
    "13": PayrollCategory.DECIMO_TERCEIRO,
}


def _echo_alert(group, entry) -> None:
    rule = match_rule(group.alert_rules, entry)
    if rule is not None:
        click.echo(f"Alert: {rule.message}")


@click.group()
def add_group():
    """Add bills, payments and payroll lines to a store."""
    pass


@add_group.command("dda")
@click.option("--store", required=True, help="Store name")
@click.option("--beneficiary", required=True, help="Who issued the bill")
@click.option("--document", default="", help="Document id (CNPJ/CPF or bill number)")
@click.option("--due", required=True, help="Due date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--amount", required=True, help="Bill amount")
@click.pass_context
def add_dda(ctx, store: str, beneficiary: str, document: str, due: str, amount: str):
    """Add an auto-debit (DDA) bill.

    Examples:
        storeledger add dda --store "Loja 1" --beneficiary "Energia SA" --due 10/05/2024 --amount "R$ 300,00"
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    bill = AutoDebit(
        beneficiary=beneficiary.strip(),
        document_id=document.strip(),
        due_date=parse_date_or_exit(ctx, due, "due date"),
        amount=parse_amount_or_exit(ctx, amount),
    )

    try:
        group = service.update_group(
            group_name, lambda g: add_entries(g, store, EntryKind.AUTO_DEBIT, [bill])
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added bill '{bill.beneficiary}' of {format_brl(bill.amount)} to '{store}'")
    _echo_alert(group, bill)


@add_group.command("payment")
@click.option("--store", required=True, help="Store name")
@click.option("--payee", required=True, help="Who is paid")
@click.option(
    "--method",
    type=click.Choice(sorted(METHOD_CHOICES), case_sensitive=False),
    default="pix",
    show_default=True,
    help="Payment method",
)
@click.option("--amount", required=True, help="Payment amount")
@click.option("--date", "when", default="today", help="Payment date (defaults to today)")
@click.option("--pix-key", help="PIX key (remembered for the payee)")
@click.option("--tax-id", help="CPF/CNPJ of the payee")
@click.option("--description", help="Description")
@click.option("--attachment", help="Reference to an attached receipt or invoice")
@click.pass_context
def add_payment(
    ctx,
    store: str,
    payee: str,
    method: str,
    amount: str,
    when: str,
    pix_key: str | None,
    tax_id: str | None,
    description: str | None,
    attachment: str | None,
):
    """Add a scheduled payment.

    A payee already in the supplier directory gets its PIX key and tax id
    filled in when they are not given, and the directory remembers new ones.

    Examples:
        storeledger add payment --store "Loja 1" --payee "Fornecedor X" --amount 250 --pix-key 11222333000144
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    payment_amount = parse_amount_or_exit(ctx, amount)
    payment_date = parse_date_or_exit(ctx, when)

    known = find_supplier(service.get_group(group_name).suppliers, payee)
    if known is not None:
        pix_key = pix_key or known.pix_key
        tax_id = tax_id or known.tax_id

    payment = ScheduledPayment(
        payee=payee.strip(),
        method=METHOD_CHOICES[method.lower()],
        amount=payment_amount,
        date=payment_date,
        pix_key=pix_key,
        tax_id=tax_id,
        description=description,
        attachment_ref=attachment,
    )

    try:
        group = service.update_group(
            group_name,
            lambda g: remember_payee(add_entries(g, store, EntryKind.SCHEDULED, [payment]), payment),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added payment to '{payment.payee}' of {format_brl(payment.amount)} to '{store}'")
    _echo_alert(group, payment)


@add_group.command("payroll")
@click.option("--store", required=True, help="Store name")
@click.option("--name", required=True, help="Collaborator name")
@click.option("--amount", required=True, help="Amount to pay")
@click.option("--date", "when", default="today", help="Payment date (defaults to today)")
@click.option(
    "--category",
    type=click.Choice(sorted(CATEGORY_CHOICES), case_sensitive=False),
    default="salario",
    show_default=True,
    help="Payroll category",
)
@click.option("--pix-key", help="PIX key")
@click.option("--tax-id", help="CPF of the collaborator")
@click.pass_context
def add_payroll(
    ctx,
    store: str,
    name: str,
    amount: str,
    when: str,
    category: str,
    pix_key: str | None,
    tax_id: str | None,
):
    """Add one payroll line, using the supplier directory as memory."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    line = ScheduledPayment(
        payee=name.strip(),
        method=PaymentMethod.PIX,
        amount=parse_amount_or_exit(ctx, amount),
        date=parse_date_or_exit(ctx, when),
        pix_key=pix_key,
        tax_id=tax_id,
        payroll_category=CATEGORY_CHOICES[category.lower()],
    )

    try:
        group, stats = merge_payroll_import(service.get_group(group_name), store, [line])
        service.save_group(group_name, group)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added payroll line for '{line.payee}' of {format_brl(line.amount)} to '{store}'")
    if stats.pix_recovered:
        click.echo("PIX key filled in from the supplier directory")


def _read_payroll_csv(csv_file: str, default_date) -> list[ScheduledPayment]:
    """Read payroll lines from a CSV file.

    Columns: name, amount, and optionally date, pix_key, tax_id, category.
    """
    lines = []
    with open(csv_file, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for row_num, row in enumerate(reader, start=2):
            row = {(k or "").strip().lower(): (v or "").strip() for k, v in row.items()}
            if not row.get("name"):
                raise ValueError(f"Row {row_num}: missing name")
            try:
                amount = parse_amount(row.get("amount", ""))
                when = parse_date(row["date"]) if row.get("date") else default_date
            except ValueError as e:
                raise ValueError(f"Row {row_num}: {e}")
            category_key = row.get("category", "").lower()
            if category_key and category_key not in CATEGORY_CHOICES:
                raise ValueError(f"Row {row_num}: unknown category '{row['category']}'")
            lines.append(
                ScheduledPayment(
                    payee=row["name"],
                    method=PaymentMethod.PIX,
                    amount=amount,
                    date=when,
                    pix_key=row.get("pix_key") or None,
                    tax_id=row.get("tax_id") or None,
                    payroll_category=CATEGORY_CHOICES.get(category_key, PayrollCategory.SALARIO),
                )
            )
    return lines


@add_group.command("payroll-import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--store", required=True, help="Store name")
@click.option("--date", "when", default="today", help="Date for rows without one")
@click.pass_context
def import_payroll(ctx, csv_file: str, store: str, when: str):
    """Import payroll lines from a CSV file.

    The file needs 'name' and 'amount' columns; 'date', 'pix_key', 'tax_id'
    and 'category' are optional. Unknown collaborators are added to the
    supplier directory and missing PIX keys are recovered from it.
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    default_date = parse_date_or_exit(ctx, when)

    try:
        lines = _read_payroll_csv(csv_file, default_date)
        group, stats = merge_payroll_import(service.get_group(group_name), store, lines)
        service.save_group(group_name, group)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {stats.imported} payroll lines")
    click.echo(f"  New collaborators: {stats.new_suppliers}")
    click.echo(f"  PIX keys recovered: {stats.pix_recovered}")


def register_commands(cli):
    """Register add commands with main CLI."""
    cli.add_command(add_group, name="add")
