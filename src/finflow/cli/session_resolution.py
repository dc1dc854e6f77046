"""Helpers for opening the signed-in session from CLI commands."""

import click

from finflow.domain.errors import DomainError
from finflow.domain.ledger import Ledger
from finflow.domain.session import AppSession
from finflow.cli.error_handling import handle_domain_error


def get_session(ctx: click.Context) -> AppSession:
    return ctx.obj["session"]


def open_ledger_or_exit(ctx: click.Context) -> Ledger:
    """Start the session and return its loaded ledger, exiting when signed out."""
    session = get_session(ctx)
    try:
        session.start()
        session.require_user()
    except DomainError as e:
        handle_domain_error(ctx, e)
    return session.ledger
