"""Sign-in and sign-out commands."""

import click

from finflow.cli.error_handling import handle_domain_error
from finflow.cli.session_resolution import get_session
from finflow.domain.errors import DomainError


@click.command("login")
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.pass_context
def login(ctx, email: str, password: str) -> None:
    """Sign in to the hosted store and load your data."""
    session = get_session(ctx)
    try:
        session.sign_in(email, password)
    except DomainError as e:
        handle_domain_error(ctx, e)

    ledger = session.ledger
    who = session.user.email if session.user and session.user.email else email
    click.echo(f"Signed in as {who}")
    click.echo(f"  Transactions: {len(ledger.transactions)}")
    click.echo(f"  Debts: {len(ledger.debts)}")


@click.command("logout")
@click.pass_context
def logout(ctx) -> None:
    """Sign out and forget the saved session."""
    get_session(ctx).sign_out()
    click.echo("Signed out")


def register_commands(cli: click.Group) -> None:
    """Register auth commands with main CLI."""
    cli.add_command(login)
    cli.add_command(logout)
