"""Commands for listing and bulk-editing a store's entries."""

from dataclasses import replace
from datetime import date

import click
from storeledger.cli.commands.add import CATEGORY_CHOICES
from storeledger.cli.error_handling import handle_domain_error
from storeledger.cli.formatting import describe_entry
from storeledger.cli.group_resolution import (
    KIND_CHOICES,
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_group_or_exit,
    selection_or_exit,
    workspace_service,
)
from storeledger.domain.alerts import is_overdue, store_alerts
from storeledger.domain.bulk import (
    count_in_status,
    delete_selected,
    recategorize_selected,
    reopen_selected,
    schedule_selected,
    selection_total,
    toggle_status,
    update_store_entries,
)
from storeledger.domain.entities import AutoDebit, EntryKind, EntryStatus
from storeledger.domain.errors import DomainError
from storeledger.domain.ledger import get_store
from storeledger.domain.stores import move_entry, replace_entry
from storeledger.utils.amount_parser import format_brl

STATUS_KINDS = ["dda", "payroll", "scheduled", "transfer"]
EDIT_KINDS = ["dda", "payroll", "scheduled"]


def _selected_entries(ctx, store: str, kind: EntryKind, numbers, select_all):
    """Load the group and resolve a selection over one store's entries."""
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    try:
        entries = get_store(service.get_group(group_name), store).entries(kind)
    except DomainError as e:
        handle_domain_error(ctx, e)
    return service, group_name, entries, selection_or_exit(ctx, entries, numbers, select_all)


def _selection_options(func):
    func = click.option("--all", "select_all", is_flag=True, help="Select every entry")(func)
    func = click.option(
        "--index", "-i", "numbers", type=int, multiple=True, help="Entry number (repeatable)"
    )(func)
    return func


@click.group()
def entries_group():
    """List and update the entries of a store."""
    pass


@entries_group.command("list")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(list(KIND_CHOICES)), help="Only this kind of entry")
@click.option("--history", is_flag=True, help="Show archived entries instead of live ones")
@click.pass_context
def list_entries(ctx, store: str, kind: str | None, history: bool):
    """List a store's entries, numbered for use with --index.

    Live bills past their due date are flagged OVERDUE and entries matching
    an alert rule show the rule's message.
    """
    service = workspace_service(ctx)
    group_name = resolve_group_or_exit(ctx, service)
    group = service.get_group(group_name)
    try:
        store_obj = get_store(group, store)
    except DomainError as e:
        handle_domain_error(ctx, e)

    source = store_obj.history if history else store_obj
    alerts = {} if history else {(k, i): rule for k, i, _, rule in store_alerts(group, store)}
    today = date.today()
    kinds = [KIND_CHOICES[kind]] if kind else list(EntryKind)

    shown = 0
    for entry_kind in kinds:
        entries = source.entries(entry_kind)
        if not entries:
            continue
        click.echo(f"\n{entry_kind.label.upper()} ({len(entries)}):")
        click.echo("-" * 90)
        for index, entry in enumerate(entries):
            flags = []
            if not history and isinstance(entry, AutoDebit) and is_overdue(entry, today):
                flags.append("OVERDUE")
            rule = alerts.get((entry_kind, index))
            if rule is not None:
                flags.append(f"ALERT: {rule.message}")
            suffix = f"  <{' | '.join(flags)}>" if flags else ""
            click.echo(f"{index + 1:3d}. {describe_entry(entry)}{suffix}")
            shown += 1

    if shown == 0:
        click.echo("No archived entries found." if history else "No entries found.")


def _apply_status(ctx, store, kind_label, numbers, select_all, target: EntryStatus):
    kind = KIND_CHOICES[kind_label]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, kind, numbers, select_all
    )
    already = count_in_status(entries, selected, target)
    transform = schedule_selected if target is EntryStatus.SCHEDULED else reopen_selected
    try:
        service.update_group(
            group_name,
            lambda g: update_store_entries(g, store, kind, lambda es: transform(es, selected)),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    changed = len(selected) - already
    click.echo(
        f"Marked {changed} {kind.label} entr{'y' if changed == 1 else 'ies'} as {target.value} "
        f"({format_brl(selection_total(entries, selected))} selected)"
    )


@entries_group.command("schedule")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(STATUS_KINDS), required=True, help="Entry kind")
@_selection_options
@click.pass_context
def schedule(ctx, store: str, kind: str, numbers: tuple[int, ...], select_all: bool):
    """Mark the selected entries as scheduled (paid).

    Examples:
        storeledger entries schedule --store "Loja 1" --kind dda -i 1 -i 3
        storeledger entries schedule --store "Loja 1" --kind payroll --all
    """
    _apply_status(ctx, store, kind, numbers, select_all, EntryStatus.SCHEDULED)


@entries_group.command("reopen")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(STATUS_KINDS), required=True, help="Entry kind")
@_selection_options
@click.pass_context
def reopen(ctx, store: str, kind: str, numbers: tuple[int, ...], select_all: bool):
    """Mark the selected entries as open again."""
    _apply_status(ctx, store, kind, numbers, select_all, EntryStatus.OPEN)


@entries_group.command("toggle")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(STATUS_KINDS), required=True, help="Entry kind")
@click.argument("number", type=int)
@click.pass_context
def toggle(ctx, store: str, kind: str, number: int):
    """Flip one entry between open and scheduled."""
    entry_kind = KIND_CHOICES[kind]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, entry_kind, (number,), False
    )
    index = next(iter(selected))
    try:
        service.update_group(
            group_name,
            lambda g: update_store_entries(g, store, entry_kind, lambda es: toggle_status(es, index)),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Entry #{number} is now {entries[index].status.toggled().value}")


@entries_group.command("delete")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(EDIT_KINDS), required=True, help="Entry kind")
@_selection_options
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, store: str, kind: str, numbers: tuple[int, ...], select_all: bool, yes: bool):
    """Delete the selected entries.

    Transfers are deleted with 'storeledger transfer delete'.
    """
    entry_kind = KIND_CHOICES[kind]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, entry_kind, numbers, select_all
    )
    if not selected:
        click.echo("Nothing to delete.")
        return

    total = format_brl(selection_total(entries, selected))
    if not yes and not click.confirm(f"Delete {len(selected)} {kind} entries totaling {total}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.update_group(
            group_name,
            lambda g: update_store_entries(
                g, store, entry_kind, lambda es: delete_selected(es, selected)
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {len(selected)} {kind} entries ({total})")


@entries_group.command("recategorize")
@click.option("--store", required=True, help="Store name")
@click.option(
    "--category",
    type=click.Choice(sorted(CATEGORY_CHOICES), case_sensitive=False),
    required=True,
    help="New payroll category",
)
@_selection_options
@click.pass_context
def recategorize(ctx, store: str, category: str, numbers: tuple[int, ...], select_all: bool):
    """Change the category of the selected payroll lines."""
    new_category = CATEGORY_CHOICES[category.lower()]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, EntryKind.PAYROLL, numbers, select_all
    )
    try:
        service.update_group(
            group_name,
            lambda g: update_store_entries(
                g,
                store,
                EntryKind.PAYROLL,
                lambda es: recategorize_selected(es, selected, new_category),
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recategorized {len(selected)} payroll line(s) as {new_category.value}")


@entries_group.command("move")
@click.option("--store", required=True, help="Store the entry is in")
@click.option("--kind", type=click.Choice(EDIT_KINDS), required=True, help="Entry kind")
@click.option("--to", "destination", required=True, help="Store to move the entry to")
@click.argument("number", type=int)
@click.pass_context
def move(ctx, store: str, kind: str, destination: str, number: int):
    """Move one entry to the end of another store's list."""
    entry_kind = KIND_CHOICES[kind]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, entry_kind, (number,), False
    )
    index = next(iter(selected))
    try:
        service.update_group(
            group_name, lambda g: move_entry(g, store, entry_kind, index, destination)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Moved {kind} entry #{number} from '{store}' to '{destination}'")


@entries_group.command("edit")
@click.option("--store", required=True, help="Store name")
@click.option("--kind", type=click.Choice(EDIT_KINDS), required=True, help="Entry kind")
@click.argument("number", type=int)
@click.option("--name", help="New beneficiary or payee")
@click.option("--amount", help="New amount")
@click.option("--date", "when", help="New due date or payment date")
@click.option("--document", help="New document id (bills only)")
@click.option("--description", help="New description (payments only)")
@click.option("--pix-key", help="New PIX key (payments only)")
@click.pass_context
def edit(
    ctx,
    store: str,
    kind: str,
    number: int,
    name: str | None,
    amount: str | None,
    when: str | None,
    document: str | None,
    description: str | None,
    pix_key: str | None,
):
    """Correct one entry in place."""
    entry_kind = KIND_CHOICES[kind]
    service, group_name, entries, selected = _selected_entries(
        ctx, store, entry_kind, (number,), False
    )
    index = next(iter(selected))
    entry = entries[index]

    changes = {}
    if amount is not None:
        changes["amount"] = parse_amount_or_exit(ctx, amount)
    if entry_kind is EntryKind.AUTO_DEBIT:
        if name is not None:
            changes["beneficiary"] = name.strip()
        if when is not None:
            changes["due_date"] = parse_date_or_exit(ctx, when, "due date")
        if document is not None:
            changes["document_id"] = document.strip()
    else:
        if name is not None:
            changes["payee"] = name.strip()
        if when is not None:
            changes["date"] = parse_date_or_exit(ctx, when)
        if description is not None:
            changes["description"] = description
        if pix_key is not None:
            changes["pix_key"] = pix_key.strip() or None

    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        service.update_group(
            group_name,
            lambda g: replace_entry(g, store, entry_kind, index, replace(entry, **changes)),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated {kind} entry #{number}")


def register_commands(cli):
    """Register entries commands with main CLI."""
    cli.add_command(entries_group, name="entries")
