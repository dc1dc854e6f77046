"""Derived statistics over the ledger and the debt collection."""

from decimal import Decimal
from typing import Iterable, Sequence

from finflow.domain.entities import (
    Debt,
    DebtType,
    FinancialStats,
    Transaction,
    TransactionType,
)

INCOME_LABEL = "Ingresos"
EXPENSE_LABEL = "Gastos"


def _sum_transactions(transactions: Iterable[Transaction], kind: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type == kind), Decimal("0"))


def _sum_outstanding(debts: Iterable[Debt], kind: DebtType) -> Decimal:
    return sum(
        (d.amount - d.paid_amount for d in debts if d.type == kind and not d.is_paid),
        Decimal("0"),
    )


def compute_stats(transactions: Sequence[Transaction], debts: Sequence[Debt]) -> FinancialStats:
    """Recompute all aggregates from scratch.

    Paid debts are excluded from the outstanding totals regardless of their
    recorded paid amount.
    """
    income = _sum_transactions(transactions, TransactionType.INCOME)
    expenses = _sum_transactions(transactions, TransactionType.EXPENSE)
    return FinancialStats(
        total_balance=income - expenses,
        total_income=income,
        total_expenses=expenses,
        total_debt_to_pay=_sum_outstanding(debts, DebtType.OWED_BY_ME),
        total_debt_to_receive=_sum_outstanding(debts, DebtType.OWED_TO_ME),
    )


def chart_data(stats: FinancialStats) -> list[tuple[str, Decimal]]:
    """Income versus expenses series for dashboard charts."""
    return [
        (INCOME_LABEL, stats.total_income),
        (EXPENSE_LABEL, stats.total_expenses),
    ]


def chart_shares(stats: FinancialStats) -> list[tuple[str, Decimal]]:
    """Each chart series as a percentage of income plus expenses.

    Both shares are 0 when there is neither income nor expense.
    """
    series = chart_data(stats)
    total = sum((value for _, value in series), Decimal("0"))
    if total <= 0:
        return [(label, Decimal("0")) for label, _ in series]
    return [(label, value / total * 100) for label, value in series]
