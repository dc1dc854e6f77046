"""Tests for the ledger and debt model over the SQL gateway."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from finflow.domain.categories import PAYMENT_CATEGORY
from finflow.domain.entities import DebtType, TransactionType
from finflow.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from finflow.domain.ledger import Ledger


@pytest.fixture
def debt(ledger):
    """An OWED_BY_ME debt of 100 with nothing paid."""
    return ledger.record_debt("Ana", "100", DebtType.OWED_BY_ME, "prestamo")


class TestTransactions:
    """Tests for transaction operations."""

    def test_record_transaction_round_trip(self, ledger, temp_db, clock):
        txn = ledger.record_transaction("42.50", TransactionType.EXPENSE, "Comida", "almuerzo")

        assert txn.id
        assert txn.amount == Decimal("42.50")
        assert txn.date == clock.current

        stored = temp_db.list_transactions()
        assert len(stored) == 1
        assert stored[0].id == txn.id
        assert stored[0].amount == Decimal("42.50")
        assert stored[0].type == TransactionType.EXPENSE
        assert stored[0].category == "Comida"
        assert stored[0].note == "almuerzo"
        assert stored[0].date == txn.date

    def test_amounts_are_stored_exactly(self, ledger, temp_db):
        ledger.record_transaction("10.005", TransactionType.EXPENSE, "Comida")
        debt = ledger.record_debt("Ana", "1234567.891", DebtType.OWED_TO_ME)
        ledger.settle_debt_payment(debt.id, "0.001")

        assert temp_db.list_transactions()[-1].amount == Decimal("10.005")
        stored = temp_db.list_debts()[0]
        assert stored.amount == Decimal("1234567.891")
        assert stored.paid_amount == Decimal("0.001")

    def test_new_transactions_are_prepended(self, ledger):
        first = ledger.record_transaction("1", TransactionType.INCOME, "Salario")
        second = ledger.record_transaction("2", TransactionType.EXPENSE, "Comida")
        assert [t.id for t in ledger.transactions] == [second.id, first.id]

    def test_record_transaction_rejects_non_numeric(self, ledger, temp_db):
        with pytest.raises(ValidationError):
            ledger.record_transaction("abc", TransactionType.EXPENSE, "Comida")
        assert ledger.transactions == []
        assert temp_db.list_transactions() == []

    def test_update_transaction_keeps_date_and_position(self, ledger, temp_db):
        older = ledger.record_transaction("10", TransactionType.EXPENSE, "Comida")
        newer = ledger.record_transaction("20", TransactionType.EXPENSE, "Transporte")

        updated = ledger.update_transaction(
            older.id, "15", TransactionType.INCOME, "Regalos", "corregido"
        )

        assert updated.date == older.date
        assert updated.amount == Decimal("15")
        assert updated.type == TransactionType.INCOME
        assert [t.id for t in ledger.transactions] == [newer.id, older.id]
        assert ledger.transactions[1] == updated
        assert temp_db.list_transactions()[1].category == "Regalos"

    def test_update_unknown_transaction(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.update_transaction("missing", "1", TransactionType.INCOME, "Salario")

    def test_delete_transaction(self, ledger, temp_db):
        txn = ledger.record_transaction("10", TransactionType.EXPENSE, "Comida")
        ledger.delete_transaction(txn.id)
        assert ledger.transactions == []
        assert temp_db.list_transactions() == []

    def test_delete_unknown_transaction_fails(self, ledger):
        txn = ledger.record_transaction("10", TransactionType.EXPENSE, "Comida")
        with pytest.raises(NotFoundError):
            ledger.delete_transaction("missing")
        assert [t.id for t in ledger.transactions] == [txn.id]


class TestDebts:
    """Tests for debt operations."""

    def test_record_debt(self, debt, temp_db):
        assert debt.paid_amount == Decimal("0")
        assert debt.is_paid is False
        assert debt.created_at is not None
        assert temp_db.list_debts()[0].person == "Ana"

    def test_record_debt_requires_person(self, ledger):
        with pytest.raises(ValidationError):
            ledger.record_debt("  ", "10", DebtType.OWED_TO_ME)
        assert ledger.debts == []

    def test_update_debt_keeps_settlement_fields(self, ledger, debt):
        ledger.settle_debt_payment(debt.id, "30")
        updated = ledger.update_debt(debt.id, "Ana Maria", "100", DebtType.OWED_BY_ME, "nota")
        assert updated.person == "Ana Maria"
        assert updated.paid_amount == Decimal("30")
        assert updated.is_paid is False

    def test_update_debt_amount_below_paid_clamps(self, ledger, debt):
        ledger.settle_debt_payment(debt.id, "80")
        updated = ledger.update_debt(debt.id, "Ana", "50", DebtType.OWED_BY_ME)
        assert updated.amount == Decimal("50")
        assert updated.paid_amount == Decimal("50")
        assert updated.is_paid is True

    def test_update_debt_amount_above_paid_reopens(self, ledger, debt):
        ledger.settle_debt_payment(debt.id, "100")
        updated = ledger.update_debt(debt.id, "Ana", "150", DebtType.OWED_BY_ME)
        assert updated.paid_amount == Decimal("100")
        assert updated.is_paid is False

    def test_delete_debt(self, ledger, debt, temp_db):
        ledger.delete_debt(debt.id)
        assert ledger.debts == []
        assert temp_db.list_debts() == []

    def test_delete_unknown_debt_fails(self, ledger, debt):
        with pytest.raises(NotFoundError):
            ledger.delete_debt("missing")
        assert [d.id for d in ledger.debts] == [debt.id]


class TestSettlement:
    """Tests for settle_debt_payment."""

    def test_partial_payment(self, ledger, debt, temp_db):
        updated, txn = ledger.settle_debt_payment(debt.id, "30")

        assert updated.paid_amount == Decimal("30")
        assert updated.is_paid is False
        assert txn.amount == Decimal("30")
        assert txn.type == TransactionType.EXPENSE
        assert txn.category == PAYMENT_CATEGORY
        assert txn.note == "Abono de: Ana"
        assert ledger.transactions[0] == txn
        assert ledger.get_debt(debt.id) == updated
        assert temp_db.list_debts()[0].paid_amount == Decimal("30")

    def test_payment_on_owed_to_me_is_income(self, ledger):
        loan = ledger.record_debt("Luis", "40", DebtType.OWED_TO_ME)
        _, txn = ledger.settle_debt_payment(loan.id, "40")
        assert txn.type == TransactionType.INCOME
        assert txn.category == PAYMENT_CATEGORY
        assert ledger.stats.total_income == Decimal("40")

    def test_overpayment_clamps(self, ledger, debt):
        ledger.settle_debt_payment(debt.id, "80")
        updated, txn = ledger.settle_debt_payment(debt.id, "50")
        assert updated.paid_amount == Decimal("100")
        assert updated.is_paid is True
        assert txn.amount == Decimal("20")

    def test_overpayment_full_payment_mode(self, temp_db, clock):
        ledger = Ledger(temp_db, record_full_payment=True, clock=clock)
        debt = ledger.record_debt("Ana", "100", DebtType.OWED_BY_ME)
        ledger.settle_debt_payment(debt.id, "80")
        updated, txn = ledger.settle_debt_payment(debt.id, "50")
        assert updated.paid_amount == Decimal("100")
        assert txn.amount == Decimal("50")

    def test_payments_are_monotonic(self, ledger, debt):
        previous = Decimal("0")
        for payment in ("10", "0.5", "30", "70"):
            updated, _ = ledger.settle_debt_payment(debt.id, payment)
            assert updated.paid_amount >= previous
            assert Decimal("0") <= updated.paid_amount <= updated.amount
            assert updated.is_paid == (updated.paid_amount >= updated.amount)
            previous = updated.paid_amount
        assert updated.is_paid is True

    @pytest.mark.parametrize("payment", ["abc", -5, "0", ""])
    def test_rejected_payments_change_nothing(self, ledger, debt, temp_db, payment):
        with pytest.raises(ValidationError):
            ledger.settle_debt_payment(debt.id, payment)
        assert ledger.debts == [debt]
        assert ledger.transactions == []
        assert temp_db.list_transactions() == []
        assert temp_db.list_debts()[0].paid_amount == Decimal("0")

    def test_unknown_debt(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.settle_debt_payment("missing", "10")

    def test_paid_debt_rejects_payment(self, ledger, debt):
        ledger.settle_debt_payment(debt.id, "100")
        with pytest.raises(ConflictError):
            ledger.settle_debt_payment(debt.id, "1")
        assert len(ledger.transactions) == 1

    def test_overpaid_row_rejects_payment(self, ledger, debt, temp_db):
        temp_db.update_debt(debt.id, amount=Decimal("50"), paid_amount=Decimal("80"), is_paid=False)
        ledger.load()

        with pytest.raises(ConflictError):
            ledger.settle_debt_payment(debt.id, "10")

        assert ledger.get_debt(debt.id).paid_amount == Decimal("80")
        assert ledger.transactions == []
        assert temp_db.list_transactions() == []
        assert temp_db.list_debts()[0].paid_amount == Decimal("80")

    def test_settlement_is_atomic(self, ledger, debt, temp_db, monkeypatch):
        session = temp_db._get_session()

        def failing_commit():
            raise OperationalError("INSERT", {}, Exception("disk full"))

        monkeypatch.setattr(session, "commit", failing_commit)
        with pytest.raises(PersistenceError):
            ledger.settle_debt_payment(debt.id, "30")
        monkeypatch.undo()

        assert ledger.debts == [debt]
        assert ledger.transactions == []
        assert temp_db.list_transactions() == []
        assert temp_db.list_debts()[0].paid_amount == Decimal("0")


class TestLifecycle:
    """Tests for loading, clearing and derived views."""

    def test_load_and_clear(self, ledger, temp_db, clock):
        ledger.record_transaction("5", TransactionType.INCOME, "Salario")
        ledger.record_debt("Ana", "10", DebtType.OWED_TO_ME)

        fresh = Ledger(temp_db, clock=clock)
        fresh.load()
        assert len(fresh.transactions) == 1
        assert len(fresh.debts) == 1

        fresh.clear()
        assert fresh.transactions == []
        assert fresh.debts == []

    def test_load_orders_newest_first(self, ledger, temp_db, clock):
        first = ledger.record_transaction("1", TransactionType.INCOME, "Salario")
        second = ledger.record_transaction("2", TransactionType.INCOME, "Salario")
        fresh = Ledger(temp_db, clock=clock)
        fresh.load()
        assert [t.id for t in fresh.transactions] == [second.id, first.id]

    def test_filtered_views(self, ledger):
        ledger.record_transaction("5", TransactionType.INCOME, "Salario")
        ledger.record_transaction("3", TransactionType.EXPENSE, "Comida")
        ledger.record_debt("Ana", "10", DebtType.OWED_TO_ME)

        assert [t.amount for t in ledger.transactions_of(TransactionType.EXPENSE)] == [Decimal("3")]
        assert ledger.debts_of(DebtType.OWED_BY_ME) == []
        assert len(ledger.debts_of(DebtType.OWED_TO_ME)) == 1

    def test_stats_follow_changes(self, ledger):
        ledger.record_transaction("200", TransactionType.INCOME, "Salario")
        txn = ledger.record_transaction("50", TransactionType.EXPENSE, "Comida")
        assert ledger.stats.total_balance == Decimal("150")

        ledger.delete_transaction(txn.id)
        assert ledger.stats.total_balance == Decimal("200")
        assert ledger.chart_data() == [("Ingresos", Decimal("200")), ("Gastos", Decimal("0"))]
