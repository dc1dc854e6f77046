"""Domain model entities for finflow.

These are pure data classes representing business concepts, independent of
the storage backend. Gateways translate their own record shapes into these
entities (see finflow.database.mappers).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class DebtType(str, Enum):
    """Who owes whom."""

    OWED_TO_ME = "OWED_TO_ME"  # someone owes me money
    OWED_BY_ME = "OWED_BY_ME"  # I owe money to someone


class Currency(str, Enum):
    """Display currency. Never affects stored amounts."""

    USD = "USD"
    COP = "COP"
    EUR = "EUR"


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    amount: Decimal
    type: TransactionType
    category: str
    date: datetime
    note: str = ""


@dataclass(frozen=True)
class Debt:
    """Debt domain entity with partial-payment tracking."""

    id: str
    person: str
    amount: Decimal
    type: DebtType
    paid_amount: Decimal = Decimal("0")
    is_paid: bool = False
    note: str = ""
    created_at: Optional[datetime] = None

    @property
    def remaining(self) -> Decimal:
        """Outstanding balance, never negative."""
        return max(self.amount - self.paid_amount, Decimal("0"))

    @property
    def progress(self) -> Decimal:
        """Paid fraction in the range 0..1."""
        if self.amount <= 0:
            return Decimal("1") if self.is_paid else Decimal("0")
        return min(self.paid_amount / self.amount, Decimal("1"))


@dataclass(frozen=True)
class FinancialStats:
    """Aggregates derived from the current collections. Never persisted."""

    total_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    total_debt_to_pay: Decimal
    total_debt_to_receive: Decimal
