"""Shared domain error messages and error types."""

from typing import Optional

from finflow.domain.entities import Debt


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Operation not allowed in the entity's current state."""


class AuthenticationError(DomainError):
    """Sign-in rejected by the identity provider."""


class PersistenceError(DomainError):
    """The data store or the network call to it failed."""


class PartialSettlementError(PersistenceError):
    """A settlement updated the debt but failed to record its transaction.

    The updated debt is kept on the error so callers can reconcile the
    in-memory state with what the store actually holds.
    """

    def __init__(self, message: str, debt: Optional[Debt] = None):
        super().__init__(message)
        self.debt = debt


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def debt_not_found(debt_id: str) -> str:
    """Return message for missing debt."""
    return f"Debt {debt_id} not found"


def invalid_amount(value: object) -> str:
    """Return message for an amount that is not a finite number."""
    return f"Invalid amount: {value!r}"


def non_positive_payment(value: object) -> str:
    """Return message for a payment that is zero or negative."""
    return f"Payment amount must be greater than zero, got {value}"


def debt_already_paid(debt_id: str) -> str:
    """Return message when paying a debt that is already settled."""
    return f"Debt {debt_id} is already paid"


def partially_settled(debt_id: str, reason: object) -> str:
    """Return message when only the debt side of a settlement was stored."""
    return (
        f"Debt {debt_id} was updated but its payment transaction could not be "
        f"recorded: {reason}"
    )
