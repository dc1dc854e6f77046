"""Domain layer for finflow application."""

from finflow.domain.entities import (
    Currency,
    Debt,
    DebtType,
    FinancialStats,
    Transaction,
    TransactionType,
)
from finflow.domain.ledger import Ledger

__all__ = [
    "Currency",
    "Debt",
    "DebtType",
    "FinancialStats",
    "Ledger",
    "Transaction",
    "TransactionType",
]
