"""Tests for derived statistics."""

from datetime import datetime, UTC
from decimal import Decimal

from finflow.domain.entities import Debt, DebtType, Transaction, TransactionType
from finflow.domain.stats import chart_data, chart_shares, compute_stats


def make_transaction(amount: str, kind: TransactionType) -> Transaction:
    return Transaction(
        id=f"t-{amount}-{kind.value}",
        amount=Decimal(amount),
        type=kind,
        category="Otros",
        date=datetime.now(UTC),
    )


def make_debt(kind: DebtType, amount: str, paid: str, is_paid: bool) -> Debt:
    return Debt(
        id=f"d-{amount}-{paid}",
        person="Ana",
        amount=Decimal(amount),
        type=kind,
        paid_amount=Decimal(paid),
        is_paid=is_paid,
    )


def test_empty_collections():
    stats = compute_stats([], [])
    assert stats.total_balance == 0
    assert stats.total_income == 0
    assert stats.total_expenses == 0
    assert stats.total_debt_to_pay == 0
    assert stats.total_debt_to_receive == 0


def test_income_expense_balance():
    stats = compute_stats(
        [
            make_transaction("200", TransactionType.INCOME),
            make_transaction("50", TransactionType.EXPENSE),
        ],
        [],
    )
    assert stats.total_income == Decimal("200")
    assert stats.total_expenses == Decimal("50")
    assert stats.total_balance == Decimal("150")


def test_balance_can_go_negative():
    stats = compute_stats([make_transaction("80.50", TransactionType.EXPENSE)], [])
    assert stats.total_balance == Decimal("-80.50")


def test_outstanding_debts_exclude_paid():
    stats = compute_stats(
        [],
        [
            make_debt(DebtType.OWED_BY_ME, "100", "30", False),
            make_debt(DebtType.OWED_TO_ME, "40", "40", True),
        ],
    )
    assert stats.total_debt_to_pay == Decimal("70")
    assert stats.total_debt_to_receive == Decimal("0")


def test_outstanding_debts_sum_per_direction():
    stats = compute_stats(
        [],
        [
            make_debt(DebtType.OWED_BY_ME, "100", "0", False),
            make_debt(DebtType.OWED_BY_ME, "50", "25", False),
            make_debt(DebtType.OWED_TO_ME, "300", "100", False),
        ],
    )
    assert stats.total_debt_to_pay == Decimal("125")
    assert stats.total_debt_to_receive == Decimal("200")


def test_debts_do_not_affect_balance():
    stats = compute_stats(
        [make_transaction("10", TransactionType.INCOME)],
        [make_debt(DebtType.OWED_BY_ME, "100", "0", False)],
    )
    assert stats.total_balance == Decimal("10")


def test_chart_data():
    stats = compute_stats(
        [
            make_transaction("200", TransactionType.INCOME),
            make_transaction("50", TransactionType.EXPENSE),
        ],
        [],
    )
    assert chart_data(stats) == [("Ingresos", Decimal("200")), ("Gastos", Decimal("50"))]


def test_chart_shares():
    stats = compute_stats(
        [
            make_transaction("300", TransactionType.INCOME),
            make_transaction("100", TransactionType.EXPENSE),
        ],
        [],
    )
    assert chart_shares(stats) == [("Ingresos", Decimal("75")), ("Gastos", Decimal("25"))]


def test_chart_shares_without_activity():
    stats = compute_stats([], [])
    assert chart_shares(stats) == [("Ingresos", Decimal("0")), ("Gastos", Decimal("0"))]
