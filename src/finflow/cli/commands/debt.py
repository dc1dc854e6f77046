"""Debt management and settlement commands."""

import click

from finflow.cli.error_handling import handle_domain_error
from finflow.cli.session_resolution import get_session, open_ledger_or_exit
from finflow.domain.entities import Debt, DebtType
from finflow.domain.errors import DomainError

TYPE_CHOICE = click.Choice([t.value for t in DebtType], case_sensitive=False)

TYPE_LABELS = {
    DebtType.OWED_BY_ME: "I owe",
    DebtType.OWED_TO_ME: "Owed to me",
}


@click.group()
def debt_group():
    """Manage debts you owe and debts owed to you."""
    pass


@debt_group.command("add")
@click.option("--person", required=True, help="Counterparty name")
@click.option("--amount", required=True, help="Total amount owed (e.g., 300)")
@click.option("--type", "type_", type=TYPE_CHOICE, default=DebtType.OWED_BY_ME.value, show_default=True)
@click.option("--note", default="", help="Free-text note")
@click.pass_context
def add_debt(ctx, person: str, amount: str, type_: str, note: str) -> None:
    """Record a new debt with nothing paid yet.

    Examples:
        finflow debt add --person Ana --amount 300
        finflow debt add --person Luis --amount 80 --type OWED_TO_ME
    """
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)
    try:
        debt = ledger.record_debt(person, amount, DebtType(type_.upper()), note)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created debt {debt.id}")
    click.echo(f"  Person: {debt.person}")
    click.echo(f"  Type: {TYPE_LABELS[debt.type]}")
    click.echo(f"  Amount: {session.format(debt.amount)}")


@debt_group.command("update")
@click.argument("debt_id")
@click.option("--person", help="Counterparty name")
@click.option("--amount", help="Total amount owed")
@click.option("--type", "type_", type=TYPE_CHOICE, help="OWED_BY_ME or OWED_TO_ME")
@click.option("--note", help="Free-text note")
@click.pass_context
def update_debt(
    ctx,
    debt_id: str,
    person: str | None,
    amount: str | None,
    type_: str | None,
    note: str | None,
) -> None:
    """Edit a debt's person, amount, type or note.

    Payments already made are kept. Lowering the amount below what was paid
    caps the paid amount and marks the debt as paid.
    """
    ledger = open_ledger_or_exit(ctx)
    current = ledger.get_debt(debt_id)
    if current is None:
        click.echo(f"Error: Debt {debt_id} not found", err=True)
        ctx.exit(1)

    try:
        ledger.update_debt(
            debt_id,
            person=person if person is not None else current.person,
            amount=amount if amount is not None else current.amount,
            type=DebtType(type_.upper()) if type_ else current.type,
            note=note if note is not None else current.note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated debt {debt_id}")


def _status(debt: Debt) -> str:
    return "PAID" if debt.is_paid else "OPEN"


@debt_group.command("list")
@click.option("--type", "type_", type=TYPE_CHOICE, help="Show only OWED_BY_ME or OWED_TO_ME")
@click.pass_context
def list_debts(ctx, type_: str | None) -> None:
    """View debts with their repayment progress."""
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)

    debt_types = [DebtType(type_.upper())] if type_ else [DebtType.OWED_BY_ME, DebtType.OWED_TO_ME]
    for debt_type in debt_types:
        debts = ledger.debts_of(debt_type)
        click.echo(f"\n{TYPE_LABELS[debt_type]} ({len(debts)})")
        click.echo("-" * 120)
        if not debts:
            click.echo("No debts found.")
            continue
        click.echo(
            f"{'ID':<36} {'Person':<20} {'Amount':>16} {'Paid':>16} {'Remaining':>16} {'%':>5} {'Status':<6}"
        )
        for debt in debts:
            percent = f"{debt.progress * 100:.0f}"
            click.echo(
                f"{debt.id:<36} {debt.person[:20]:<20} {session.format(debt.amount):>16} "
                f"{session.format(debt.paid_amount):>16} {session.format(debt.remaining):>16} "
                f"{percent:>5} {_status(debt):<6}"
            )


@debt_group.command("pay")
@click.argument("debt_id")
@click.argument("amount")
@click.option(
    "--record-full-payment",
    is_flag=True,
    help="Record the whole payment as a transaction even if it exceeds the remaining balance",
)
@click.pass_context
def pay_debt(ctx, debt_id: str, amount: str, record_full_payment: bool) -> None:
    """Apply a (partial) payment to a debt.

    A matching transaction in category 'Pagos/Cobros' is recorded: an expense
    for debts you owe, an income for debts owed to you.

    Examples:
        finflow debt pay 9b1d... 50
    """
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)
    ledger.record_full_payment = record_full_payment

    try:
        debt, txn = ledger.settle_debt_payment(debt_id, amount)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded payment of {session.format(txn.amount)} for {debt.person}")
    click.echo(f"  Paid: {session.format(debt.paid_amount)} of {session.format(debt.amount)}")
    click.echo(f"  Remaining: {session.format(debt.remaining)}")
    if debt.is_paid:
        click.echo("  Debt fully paid")
    click.echo(f"  Transaction: {txn.id} ({txn.type.value})")


@debt_group.command("delete")
@click.argument("debt_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_debt(ctx, debt_id: str, yes: bool) -> None:
    """Delete a debt. Payment transactions already recorded are kept."""
    ledger = open_ledger_or_exit(ctx)

    if not yes and not click.confirm(f"Are you sure you want to delete debt {debt_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_debt(debt_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted debt {debt_id}")


def register_commands(cli: click.Group) -> None:
    """Register debt commands with main CLI."""
    cli.add_command(debt_group, name="debt")
