"""CLI error handling helpers."""

import click

from finflow.domain.errors import DomainError, PartialSettlementError
from finflow.utils.logging_setup import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    logger.debug("Command failed: %r", error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, PartialSettlementError) and error.debt is not None:
        click.echo(
            f"  Debt {error.debt.id} now shows {error.debt.paid_amount} paid; "
            "record the payment transaction manually.",
            err=True,
        )
    ctx.exit(1)
