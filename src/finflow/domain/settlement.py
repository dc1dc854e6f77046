"""Debt settlement arithmetic.

Pure functions only: the Ledger decides when to call them and persists the
results through the gateway.
"""

from dataclasses import dataclass
from decimal import Decimal

from finflow.domain.categories import PAYMENT_CATEGORY
from finflow.domain.entities import Debt, DebtType, TransactionType


@dataclass(frozen=True)
class SettlementPlan:
    """Outcome of applying one payment to a debt."""

    paid_amount: Decimal
    is_paid: bool
    credited: Decimal
    transaction_amount: Decimal
    transaction_type: TransactionType
    category: str
    note: str


def payment_transaction_type(debt_type: DebtType) -> TransactionType:
    """Money leaves when I pay, arrives when I am paid."""
    if DebtType(debt_type) == DebtType.OWED_BY_ME:
        return TransactionType.EXPENSE
    return TransactionType.INCOME


def payment_note(person: str) -> str:
    return f"Abono de: {person}"


def plan_settlement(debt: Debt, payment: Decimal, record_full_payment: bool = False) -> SettlementPlan:
    """Apply a positive payment to a debt.

    The new paid amount is clamped to the debt amount; any excess is
    discarded. The generated transaction records the credited amount unless
    record_full_payment is set, in which case it records the whole payment.
    """
    new_paid = debt.paid_amount + payment
    fully_paid = new_paid >= debt.amount
    # Never lower what was already paid, even on rows where paid exceeds amount
    paid_amount = max(debt.paid_amount, min(new_paid, debt.amount))
    credited = max(paid_amount - debt.paid_amount, Decimal("0"))

    return SettlementPlan(
        paid_amount=paid_amount,
        is_paid=fully_paid,
        credited=credited,
        transaction_amount=payment if record_full_payment else credited,
        transaction_type=payment_transaction_type(debt.type),
        category=PAYMENT_CATEGORY,
        note=payment_note(debt.person),
    )


def reconcile_amount_edit(debt: Debt, new_amount: Decimal) -> tuple[Decimal, bool]:
    """Return (paid_amount, is_paid) consistent with an edited debt amount."""
    paid_amount = min(debt.paid_amount, new_amount)
    return paid_amount, paid_amount >= new_amount
