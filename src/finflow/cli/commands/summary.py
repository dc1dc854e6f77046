"""Dashboard summary command."""

from decimal import Decimal

import click

from finflow.cli.session_resolution import get_session, open_ledger_or_exit

BAR_WIDTH = 40


def _bar(value: Decimal, largest: Decimal) -> str:
    if largest <= 0:
        return ""
    return "#" * int((value / largest) * BAR_WIDTH)


@click.command("summary")
@click.pass_context
def summary(ctx) -> None:
    """Show balance, income, expenses and outstanding debts."""
    ledger = open_ledger_or_exit(ctx)
    session = get_session(ctx)
    stats = ledger.stats

    click.echo("\nSummary")
    click.echo("=" * 60)
    click.echo(f"{'Balance':<22} {session.format(stats.total_balance):>24}")
    click.echo(f"{'Income':<22} {session.format(stats.total_income):>24}")
    click.echo(f"{'Expenses':<22} {session.format(stats.total_expenses):>24}")
    click.echo(f"{'Debt to pay':<22} {session.format(stats.total_debt_to_pay):>24}")
    click.echo(f"{'Debt to receive':<22} {session.format(stats.total_debt_to_receive):>24}")

    series = ledger.chart_data()
    shares = dict(ledger.chart_shares())
    largest = max((value for _, value in series), default=Decimal("0"))
    click.echo("-" * 60)
    for label, value in series:
        click.echo(
            f"{label:<10} {_bar(value, largest):<{BAR_WIDTH}} "
            f"{session.format(value)} ({shares[label]:.0f}%)"
        )


def register_commands(cli: click.Group) -> None:
    """Register summary command with main CLI."""
    cli.add_command(summary)
