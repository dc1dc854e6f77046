"""Abstract persistence gateway."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from finflow.domain.entities import Debt, DebtType, Transaction, TransactionType
from finflow.domain.errors import (
    AuthenticationError,
    PartialSettlementError,
    PersistenceError,
    partially_settled,
)
from finflow.utils.logging_setup import get_logger

logger = get_logger(__name__)


class Gateway(ABC):
    """Storage contract for the transaction and debt collections.

    Every write returns the record as stored. Updates and deletes of an
    unknown id raise NotFoundError; store or network failures raise
    PersistenceError.
    """

    def connect(self) -> None:
        """Open resources needed by the gateway."""

    def disconnect(self) -> None:
        """Release resources held by the gateway."""

    # Transaction operations
    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions, most recent date first."""

    @abstractmethod
    def create_transaction(
        self,
        amount: Decimal,
        type: TransactionType,
        category: str,
        date: datetime,
        note: str = "",
    ) -> Transaction:
        """Create a transaction. Returns the stored record with its id."""

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Update the given fields of a transaction. None leaves a field unchanged."""

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""

    # Debt operations
    @abstractmethod
    def list_debts(self) -> list[Debt]:
        """List all debts, most recently created first."""

    @abstractmethod
    def create_debt(
        self,
        person: str,
        amount: Decimal,
        type: DebtType,
        note: str = "",
    ) -> Debt:
        """Create a debt with nothing paid yet."""

    @abstractmethod
    def update_debt(
        self,
        debt_id: str,
        person: Optional[str] = None,
        amount: Optional[Decimal] = None,
        type: Optional[DebtType] = None,
        note: Optional[str] = None,
        paid_amount: Optional[Decimal] = None,
        is_paid: Optional[bool] = None,
    ) -> Debt:
        """Update the given fields of a debt. None leaves a field unchanged."""

    @abstractmethod
    def delete_debt(self, debt_id: str) -> None:
        """Delete a debt."""

    # Settlement
    def settle(
        self,
        debt_id: str,
        paid_amount: Decimal,
        is_paid: bool,
        amount: Decimal,
        type: TransactionType,
        category: str,
        date: datetime,
        note: str = "",
    ) -> tuple[Debt, Transaction]:
        """Store a debt payment and its generated transaction.

        This default runs two independent writes: the debt update first, then
        the transaction insert. If the insert fails the debt change is already
        stored, so PartialSettlementError is raised carrying the updated debt.
        Backends that support transactions override this to commit both
        writes together.
        """
        debt = self.update_debt(debt_id, paid_amount=paid_amount, is_paid=is_paid)
        try:
            transaction = self.create_transaction(
                amount=amount, type=type, category=category, date=date, note=note
            )
        except (PersistenceError, AuthenticationError) as e:
            logger.error("Settlement of debt %s left without its transaction: %s", debt_id, e)
            raise PartialSettlementError(partially_settled(debt_id, e), debt=debt) from e
        return debt, transaction
