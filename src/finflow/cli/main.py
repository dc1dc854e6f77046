"""Main CLI entry point."""

from pathlib import Path

import click

from finflow.database.factories import BACKENDS, create_backend
from finflow.domain.session import AppSession
from finflow.utils.logging_setup import configure_logging
from finflow.utils.preferences import PreferenceStore

# Import and register all commands at module level
from finflow.cli.commands import (
    auth,
    currency,
    debt,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--backend",
    type=click.Choice(BACKENDS, case_sensitive=False),
    envvar="FINFLOW_BACKEND",
    help="Storage backend (overrides FINFLOW_BACKEND environment variable)",
)
@click.option(
    "--db-path",
    type=click.Path(),
    envvar="FINFLOW_DB_PATH",
    help="Path to SQLite file for the sqlite backend",
)
@click.option("--supabase-url", envvar="FINFLOW_SUPABASE_URL", help="Supabase project URL")
@click.option("--supabase-key", envvar="FINFLOW_SUPABASE_KEY", help="Supabase anon key")
@click.option(
    "--home",
    type=click.Path(file_okay=False),
    envvar="FINFLOW_HOME",
    help="Directory holding preferences and the saved session",
)
@click.option("--log-level", envvar="FINFLOW_LOG_LEVEL", help="Logging level (e.g. INFO, DEBUG)")
@click.pass_context
def cli(
    ctx,
    backend: str | None,
    db_path: str | None,
    supabase_url: str | None,
    supabase_key: str | None,
    home: str | None,
    log_level: str | None,
):
    """Finflow - Personal income, expense and debt tracker.

    Record income and expenses, keep track of money you owe and money owed
    to you, and settle debts with partial payments.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Build the backend only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = PreferenceStore(Path(home) / "preferences.json" if home else None)
        try:
            gateway, identity = create_backend(
                backend=backend,
                store=store,
                database_path=db_path,
                supabase_url=supabase_url,
                supabase_key=supabase_key,
            )
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        session = AppSession(gateway, identity, store)
        ctx.obj["session"] = session
        ctx.call_on_close(session.close)


# Register all commands
auth.register_commands(cli)
transaction.register_commands(cli)
debt.register_commands(cli)
summary.register_commands(cli)
currency.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
