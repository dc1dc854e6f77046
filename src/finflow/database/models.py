"""SQLAlchemy models for the local finflow store."""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class DecimalString(TypeDecorator):
    """Decimal stored as its exact text form.

    SQLite has no fixed-point type, so Numeric columns would round or go
    through float. Amounts come back exactly as they were written.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


def _new_id() -> str:
    return str(uuid.uuid4())


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    amount = Column(DecimalString, nullable=False)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    note = Column(String, nullable=False, default="")
    date = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)


class Debt(Base):
    """Debt model with partial-payment columns."""

    __tablename__ = "debts"

    id = Column(String(36), primary_key=True, default=_new_id)
    person = Column(String, nullable=False)
    amount = Column(DecimalString, nullable=False)
    paid_amount = Column(DecimalString, nullable=False, default=Decimal("0"))
    is_paid = Column(Boolean, nullable=False, default=False)
    type = Column(String, nullable=False)
    note = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
