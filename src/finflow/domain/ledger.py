"""Ledger & debt model.

Holds the in-memory transaction and debt collections for one signed-in
session. Every mutation is persisted through the gateway first; memory only
changes once the store has confirmed the write.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional

from finflow.domain.entities import (
    Debt,
    DebtType,
    FinancialStats,
    Transaction,
    TransactionType,
)
from finflow.domain.errors import (
    ConflictError,
    NotFoundError,
    PartialSettlementError,
    ValidationError,
    debt_already_paid,
    debt_not_found,
    invalid_amount,
    non_positive_payment,
    transaction_not_found,
)
from finflow.domain.settlement import plan_settlement, reconcile_amount_edit
from finflow.domain.stats import chart_data, chart_shares, compute_stats
from finflow.utils.amount_parser import AmountInput, parse_amount
from finflow.utils.logging_setup import get_logger

if TYPE_CHECKING:
    from finflow.database.base import Gateway

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _amount(value: AmountInput) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        raise ValidationError(invalid_amount(value)) from e


class Ledger:
    """In-memory collections backed by a persistence gateway."""

    def __init__(
        self,
        gateway: Gateway,
        record_full_payment: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the ledger.

        Args:
            gateway: Persistence gateway for both collections
            record_full_payment: If True, a debt payment records the whole
                requested amount as a transaction even when part of it was
                not credited to the debt. By default only the credited amount
                is recorded.
            clock: Source of timestamps for new transactions
        """
        self.gateway = gateway
        self.record_full_payment = record_full_payment
        self.clock = clock
        self.transactions: list[Transaction] = []
        self.debts: list[Debt] = []

    # Session lifecycle
    def load(self) -> None:
        """Replace both collections with the store's current contents."""
        transactions = self.gateway.list_transactions()
        debts = self.gateway.list_debts()
        self.transactions = transactions
        self.debts = debts
        logger.debug("Loaded %d transactions and %d debts", len(transactions), len(debts))

    def clear(self) -> None:
        """Forget both collections."""
        self.transactions = []
        self.debts = []

    # Lookups
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return next((d for d in self.debts if d.id == debt_id), None)

    def transactions_of(self, transaction_type: TransactionType) -> list[Transaction]:
        kind = TransactionType(transaction_type)
        return [t for t in self.transactions if t.type == kind]

    def debts_of(self, debt_type: DebtType) -> list[Debt]:
        kind = DebtType(debt_type)
        return [d for d in self.debts if d.type == kind]

    # Statistics
    @property
    def stats(self) -> FinancialStats:
        """Aggregates recomputed from the current collections."""
        return compute_stats(self.transactions, self.debts)

    def chart_data(self) -> list[tuple[str, Decimal]]:
        return chart_data(self.stats)

    def chart_shares(self) -> list[tuple[str, Decimal]]:
        return chart_shares(self.stats)

    # Transactions
    def record_transaction(
        self,
        amount: AmountInput,
        type: TransactionType,
        category: str,
        note: str = "",
    ) -> Transaction:
        """Persist a new transaction dated now and put it first in the list.

        Raises:
            ValidationError: If amount is not a finite number
            PersistenceError: If the store rejects the write
        """
        value = _amount(amount)
        transaction = self.gateway.create_transaction(
            amount=value,
            type=TransactionType(type),
            category=category,
            note=note or "",
            date=self.clock(),
        )
        self.transactions.insert(0, transaction)
        logger.info("Recorded %s transaction %s", transaction.type.value, transaction.id)
        return transaction

    def update_transaction(
        self,
        transaction_id: str,
        amount: AmountInput,
        type: TransactionType,
        category: str,
        note: str = "",
    ) -> Transaction:
        """Replace the editable fields of a transaction, keeping its date and position.

        Raises:
            NotFoundError: If the transaction is not in the ledger
            ValidationError: If amount is not a finite number
            PersistenceError: If the store rejects the write
        """
        index = self._transaction_index(transaction_id)
        value = _amount(amount)
        updated = self.gateway.update_transaction(
            transaction_id,
            amount=value,
            type=TransactionType(type),
            category=category,
            note=note or "",
        )
        self.transactions[index] = updated
        logger.info("Updated transaction %s", transaction_id)
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction from the store, then from memory.

        Raises:
            NotFoundError: If the store has no such transaction
            PersistenceError: If the store rejects the delete
        """
        self.gateway.delete_transaction(transaction_id)
        self.transactions = [t for t in self.transactions if t.id != transaction_id]
        logger.info("Deleted transaction %s", transaction_id)

    # Debts
    def record_debt(
        self,
        person: str,
        amount: AmountInput,
        type: DebtType,
        note: str = "",
    ) -> Debt:
        """Persist a new, unpaid debt and put it first in the list.

        Raises:
            ValidationError: If person is empty or amount is not a finite number
            PersistenceError: If the store rejects the write
        """
        if not person or not person.strip():
            raise ValidationError("Person is required")
        value = _amount(amount)
        debt = self.gateway.create_debt(
            person=person.strip(), amount=value, type=DebtType(type), note=note or ""
        )
        self.debts.insert(0, debt)
        logger.info("Recorded debt %s with %s", debt.id, debt.person)
        return debt

    def update_debt(
        self,
        debt_id: str,
        person: str,
        amount: AmountInput,
        type: DebtType,
        note: str = "",
    ) -> Debt:
        """Edit the descriptive fields of a debt.

        Settlement fields are left alone unless the new amount makes them
        inconsistent: the paid amount is then clamped to the new amount and
        the paid flag recomputed.

        Raises:
            NotFoundError: If the debt is not in the ledger
            ValidationError: If person is empty or amount is not a finite number
            PersistenceError: If the store rejects the write
        """
        index = self._debt_index(debt_id)
        current = self.debts[index]
        if not person or not person.strip():
            raise ValidationError("Person is required")
        value = _amount(amount)

        paid_amount: Optional[Decimal] = None
        is_paid: Optional[bool] = None
        if value != current.amount:
            new_paid, new_is_paid = reconcile_amount_edit(current, value)
            if new_paid != current.paid_amount:
                paid_amount = new_paid
            if new_is_paid != current.is_paid:
                is_paid = new_is_paid

        updated = self.gateway.update_debt(
            debt_id,
            person=person.strip(),
            amount=value,
            type=DebtType(type),
            note=note or "",
            paid_amount=paid_amount,
            is_paid=is_paid,
        )
        self.debts[index] = updated
        logger.info("Updated debt %s", debt_id)
        return updated

    def delete_debt(self, debt_id: str) -> None:
        """Delete a debt from the store, then from memory.

        Raises:
            NotFoundError: If the store has no such debt
            PersistenceError: If the store rejects the delete
        """
        self.gateway.delete_debt(debt_id)
        self.debts = [d for d in self.debts if d.id != debt_id]
        logger.info("Deleted debt %s", debt_id)

    def settle_debt_payment(self, debt_id: str, payment_amount: AmountInput) -> tuple[Debt, Transaction]:
        """Apply a payment to a debt and record the matching transaction.

        The debt's paid amount never exceeds its amount; once it reaches it
        the debt is marked paid. The generated transaction is an EXPENSE for
        debts I owe and an INCOME for debts owed to me.

        Raises:
            ValidationError: If the payment is not a finite positive number
            NotFoundError: If the debt is not in the ledger
            ConflictError: If the debt is already paid or has nothing left to pay
            PartialSettlementError: If the debt was updated but the
                transaction could not be stored
            PersistenceError: If the store rejects the debt update
        """
        payment = _amount(payment_amount)
        if payment <= 0:
            raise ValidationError(non_positive_payment(payment))

        index = self._debt_index(debt_id)
        debt = self.debts[index]
        if debt.is_paid or debt.remaining <= 0:
            raise ConflictError(debt_already_paid(debt_id))

        plan = plan_settlement(debt, payment, record_full_payment=self.record_full_payment)
        if plan.credited < payment:
            logger.info(
                "Payment of %s on debt %s exceeds the remaining %s; only %s credited",
                payment, debt_id, debt.remaining, plan.credited,
            )

        try:
            updated_debt, transaction = self.gateway.settle(
                debt_id,
                paid_amount=plan.paid_amount,
                is_paid=plan.is_paid,
                amount=plan.transaction_amount,
                type=plan.transaction_type,
                category=plan.category,
                note=plan.note,
                date=self.clock(),
            )
        except PartialSettlementError as e:
            if e.debt is not None:
                self.debts[index] = e.debt
            raise

        self.debts[index] = updated_debt
        self.transactions.insert(0, transaction)
        logger.info(
            "Settled %s on debt %s (paid %s of %s)",
            plan.credited, debt_id, updated_debt.paid_amount, updated_debt.amount,
        )
        return updated_debt, transaction

    def _transaction_index(self, transaction_id: str) -> int:
        for index, transaction in enumerate(self.transactions):
            if transaction.id == transaction_id:
                return index
        raise NotFoundError(transaction_not_found(transaction_id))

    def _debt_index(self, debt_id: str) -> int:
        for index, debt in enumerate(self.debts):
            if debt.id == debt_id:
                return index
        raise NotFoundError(debt_not_found(debt_id))
