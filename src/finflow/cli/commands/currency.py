"""Display currency command."""

import click

from finflow.cli.session_resolution import get_session
from finflow.domain.entities import Currency


@click.command("currency")
@click.argument("code", required=False, type=click.Choice([c.value for c in Currency], case_sensitive=False))
@click.pass_context
def currency(ctx, code: str | None) -> None:
    """Show or change the display currency.

    Only the symbol and suffix used to display amounts change; stored
    amounts are never converted.
    """
    session = get_session(ctx)
    if code is None:
        click.echo(f"Display currency: {session.currency.value}")
        return

    chosen = session.set_currency(code)
    click.echo(f"Display currency set to {chosen.value}")


def register_commands(cli: click.Group) -> None:
    """Register currency command with main CLI."""
    cli.add_command(currency)
