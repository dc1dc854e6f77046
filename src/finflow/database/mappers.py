"""Mapper functions between domain entities and stored record shapes.

Two boundaries are handled here:

- wire records: JSON dicts exchanged with the hosted REST store
  (``{id, amount, type, category, note, date}`` for transactions and
  ``{id, person, amount, paid_amount, is_paid, type, note, created_at}``
  for debts)
- SQLAlchemy models of the local store
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from dateutil.parser import isoparse

from finflow.domain import entities as domain
from finflow.database.models import Debt as ORMDebt, Transaction as ORMTransaction


def to_decimal(value: Any, default: str = "0") -> Decimal:
    """Convert a wire number (int, float, string or None) to Decimal."""
    if value is None or value == "":
        return Decimal(default)
    return Decimal(str(value))


def to_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""
    if value is None or value == "":
        return None
    parsed = value if isinstance(value, datetime) else isoparse(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _wire_number(value: Decimal) -> float:
    return float(value)


# Wire records


def transaction_from_record(record: dict[str, Any]) -> domain.Transaction:
    """Convert a wire transaction record to a domain Transaction."""
    return domain.Transaction(
        id=str(record["id"]),
        amount=to_decimal(record.get("amount")),
        type=domain.TransactionType(record["type"]),
        category=record.get("category") or "",
        date=to_datetime(record.get("date")),
        note=record.get("note") or "",
    )


def transaction_to_record(
    amount: Optional[Decimal] = None,
    type: Optional[domain.TransactionType] = None,
    category: Optional[str] = None,
    note: Optional[str] = None,
    date: Optional[datetime] = None,
) -> dict[str, Any]:
    """Build a wire payload holding only the fields that were given."""
    record: dict[str, Any] = {}
    if amount is not None:
        record["amount"] = _wire_number(amount)
    if type is not None:
        record["type"] = domain.TransactionType(type).value
    if category is not None:
        record["category"] = category
    if note is not None:
        record["note"] = note
    if date is not None:
        record["date"] = date.isoformat()
    return record


def debt_from_record(record: dict[str, Any]) -> domain.Debt:
    """Convert a wire debt record to a domain Debt.

    A missing ``paid_amount`` reads as 0 and a missing ``is_paid`` as False.
    """
    return domain.Debt(
        id=str(record["id"]),
        person=record.get("person") or "",
        amount=to_decimal(record.get("amount")),
        type=domain.DebtType(record["type"]),
        paid_amount=to_decimal(record.get("paid_amount")),
        is_paid=bool(record.get("is_paid") or False),
        note=record.get("note") or "",
        created_at=to_datetime(record.get("created_at")),
    )


def debt_to_record(
    person: Optional[str] = None,
    amount: Optional[Decimal] = None,
    type: Optional[domain.DebtType] = None,
    note: Optional[str] = None,
    paid_amount: Optional[Decimal] = None,
    is_paid: Optional[bool] = None,
) -> dict[str, Any]:
    """Build a wire payload holding only the fields that were given."""
    record: dict[str, Any] = {}
    if person is not None:
        record["person"] = person
    if amount is not None:
        record["amount"] = _wire_number(amount)
    if type is not None:
        record["type"] = domain.DebtType(type).value
    if note is not None:
        record["note"] = note
    if paid_amount is not None:
        record["paid_amount"] = _wire_number(paid_amount)
    if is_paid is not None:
        record["is_paid"] = bool(is_paid)
    return record


# SQLAlchemy models


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=to_decimal(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        category=orm_transaction.category,
        date=to_datetime(orm_transaction.date),
        note=orm_transaction.note or "",
    )


def debt_to_domain(orm_debt: ORMDebt) -> domain.Debt:
    """Convert SQLAlchemy Debt model to domain Debt entity."""
    return domain.Debt(
        id=orm_debt.id,
        person=orm_debt.person,
        amount=to_decimal(orm_debt.amount),
        type=domain.DebtType(orm_debt.type),
        paid_amount=to_decimal(orm_debt.paid_amount),
        is_paid=bool(orm_debt.is_paid),
        note=orm_debt.note or "",
        created_at=to_datetime(orm_debt.created_at),
    )
