"""Factory functions for creating gateways and identity providers."""

import os
from typing import Optional, Union

from finflow.database.auth import LocalAuth, SupabaseAuth
from finflow.database.base import Gateway
from finflow.database.rest import SupabaseGateway
from finflow.database.sqlalchemy_db import SQLAlchemyGateway
from finflow.utils.preferences import PreferenceStore, default_home

BACKENDS = ("sqlite", "supabase")


def create_sqlite_gateway(database_path: Optional[str] = None) -> SQLAlchemyGateway:
    """Create a SQLite-backed gateway.

    Args:
        database_path: Path to SQLite database file. If None, checks FINFLOW_DB_PATH
            environment variable, then defaults to finflow.db in the finflow home
            directory

    Returns:
        SQLAlchemyGateway instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FINFLOW_DB_PATH")

    if database_path is None:
        db_dir = default_home()
        db_dir.mkdir(parents=True, exist_ok=True)
        database_path = str(db_dir / "finflow.db")

    return SQLAlchemyGateway(f"sqlite:///{database_path}")


def _supabase_settings(url: Optional[str], api_key: Optional[str]) -> tuple[str, str]:
    url = url or os.environ.get("FINFLOW_SUPABASE_URL", "")
    api_key = api_key or os.environ.get("FINFLOW_SUPABASE_KEY", "")
    if not url or not api_key:
        raise ValueError(
            "Supabase backend needs FINFLOW_SUPABASE_URL and FINFLOW_SUPABASE_KEY"
        )
    return url, api_key


def create_backend(
    backend: Optional[str] = None,
    store: Optional[PreferenceStore] = None,
    database_path: Optional[str] = None,
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
) -> tuple[Gateway, Union[SupabaseAuth, LocalAuth]]:
    """Create a matching (gateway, identity provider) pair.

    Args:
        backend: 'sqlite' or 'supabase'. If None, checks FINFLOW_BACKEND,
            then defaults to 'sqlite'
        store: Preference store holding the session slot
        database_path: SQLite file for the sqlite backend
        supabase_url: Project URL for the supabase backend
        supabase_key: Anon key for the supabase backend

    Raises:
        ValueError: If the backend is unknown or misconfigured
    """
    backend = (backend or os.environ.get("FINFLOW_BACKEND") or "sqlite").lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Choose from: {', '.join(BACKENDS)}")

    if backend == "sqlite":
        return create_sqlite_gateway(database_path), LocalAuth()

    url, api_key = _supabase_settings(supabase_url, supabase_key)
    auth = SupabaseAuth(url, api_key, store or PreferenceStore())
    gateway = SupabaseGateway(
        url, api_key, token_provider=auth.access_token, on_unauthorized=auth.refresh
    )
    return gateway, auth
