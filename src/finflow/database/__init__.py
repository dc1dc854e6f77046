"""Persistence layer for finflow."""

from finflow.database.base import Gateway
from finflow.database.factories import create_backend, create_sqlite_gateway

__all__ = ["Gateway", "create_backend", "create_sqlite_gateway"]
