"""Transaction management commands."""

import click

from finflow.cli.error_handling import handle_domain_error
from finflow.cli.session_resolution import get_session, open_ledger_or_exit
from finflow.domain.categories import categories_for, default_category
from finflow.domain.entities import TransactionType
from finflow.domain.errors import DomainError
from finflow.domain.stats import compute_stats

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)


def resolve_category(ctx: click.Context, transaction_type: TransactionType, category: str | None) -> str:
    """Return the chosen category, or the default one for the type."""
    if category is None:
        return default_category(transaction_type)
    allowed = categories_for(transaction_type)
    if category not in allowed:
        click.echo(
            f"Error: Category '{category}' is not available for {transaction_type.value}. "
            f"Choose from: {', '.join(allowed)}",
            err=True,
        )
        ctx.exit(1)
    return category


@click.group()
def transaction_group():
    """Manage income and expense transactions."""
    pass


@transaction_group.command("add")
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--type", "type_", type=TYPE_CHOICE, default=TransactionType.EXPENSE.value, show_default=True)
@click.option("--category", help="Category label (defaults to the first one for the type)")
@click.option("--note", default="", help="Free-text note")
@click.pass_context
def add_transaction(ctx, amount: str, type_: str, category: str | None, note: str) -> None:
    """Record a transaction dated now.

    Examples:
        finflow transaction add --amount 50 --category Comida
        finflow transaction add --amount 1200 --type INCOME --category Salario
    """
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)
    transaction_type = TransactionType(type_.upper())
    category = resolve_category(ctx, transaction_type, category)

    try:
        txn = ledger.record_transaction(amount, transaction_type, category, note)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Category: {txn.category}")
    click.echo(f"  Amount: {session.format(txn.amount)}")
    if txn.note:
        click.echo(f"  Note: {txn.note}")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--amount", help="Transaction amount (e.g., 123.45)")
@click.option("--type", "type_", type=TYPE_CHOICE, help="INCOME or EXPENSE")
@click.option("--category", help="Category label")
@click.option("--note", help="Free-text note")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    amount: str | None,
    type_: str | None,
    category: str | None,
    note: str | None,
) -> None:
    """Update a transaction.

    Fields that are not given keep their current value. The date never changes.

    Examples:
        finflow transaction update 5f0c... --amount 75
        finflow transaction update 5f0c... --type INCOME --category Regalos
    """
    ledger = open_ledger_or_exit(ctx)
    current = ledger.get_transaction(transaction_id)
    if current is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    transaction_type = TransactionType(type_.upper()) if type_ else current.type
    if category is None and transaction_type != current.type:
        category = default_category(transaction_type)
    elif category is not None:
        category = resolve_category(ctx, transaction_type, category)
    else:
        category = current.category

    try:
        ledger.update_transaction(
            transaction_id,
            amount=amount if amount is not None else current.amount,
            type=transaction_type,
            category=category,
            note=note if note is not None else current.note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--type", "type_", type=TYPE_CHOICE, help="Show only INCOME or EXPENSE")
@click.pass_context
def list_transactions(ctx, type_: str | None) -> None:
    """View transactions, most recent first."""
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)

    if type_:
        transactions = ledger.transactions_of(TransactionType(type_.upper()))
    else:
        transactions = list(ledger.transactions)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    click.echo(
        f"{'ID':<36} {'Date':<17} {'Type':<8} {'Category':<16} {'Amount':>16}  {'Note':<20}"
    )
    click.echo("-" * 120)
    for txn in transactions:
        date_str = txn.date.strftime("%Y-%m-%d %H:%M") if txn.date else ""
        click.echo(
            f"{txn.id:<36} {date_str:<17} {txn.type.value:<8} {txn.category[:16]:<16} "
            f"{session.format(txn.amount):>16}  {txn.note[:20]:<20}"
        )

    stats = compute_stats(transactions, [])
    click.echo("-" * 120)
    click.echo(
        f"{'TOTAL':<36} Income: {session.format(stats.total_income)} | "
        f"Expenses: {session.format(stats.total_expenses)} | Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        finflow transaction delete 5f0c...
    """
    ledger = open_ledger_or_exit(ctx)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
