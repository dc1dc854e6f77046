"""Shared pytest fixtures for finflow tests."""

import json
import tempfile
import os
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import pytest

from finflow.database.auth import LocalAuth
from finflow.database.factories import create_sqlite_gateway
from finflow.domain.ledger import Ledger
from finflow.domain.session import AppSession
from finflow.utils.preferences import PreferenceStore


class TickingClock:
    """Returns a strictly increasing UTC timestamp on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


class FakePostgrest:
    """Minimal in-memory stand-in for the PostgREST endpoints of a project."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {"transactions": [], "debts": []}
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], int] = {}
        self.expired_tokens: set[str] = set()
        self._created = 0

    def fail(self, method: str, table: str, status: int = 500) -> None:
        self.failures[(method, table)] = status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token in self.expired_tokens:
            return httpx.Response(401, json={"message": "JWT expired"})
        status = self.failures.get((request.method, table))
        if status is not None:
            return httpx.Response(status, json={"message": "simulated failure"})

        rows = self.tables[table]
        params = request.url.params

        if request.method == "GET":
            column = params["order"].split(".")[0]
            return httpx.Response(200, json=sorted(rows, key=lambda r: r[column], reverse=True))

        if request.method == "POST":
            body = json.loads(request.content)
            self._created += 1
            row = {"id": str(uuid.uuid4()), "note": "", **body}
            if table == "debts":
                row.setdefault("created_at", f"2024-01-01T00:00:{self._created:02d}+00:00")
            rows.append(row)
            return httpx.Response(201, json=[row])

        record_id = params["id"].removeprefix("eq.")
        matches = [r for r in rows if r["id"] == record_id]
        if request.method == "PATCH":
            for row in matches:
                row.update(json.loads(request.content))
            return httpx.Response(200, json=matches)
        if request.method == "DELETE":
            self.tables[table] = [r for r in rows if r["id"] != record_id]
            return httpx.Response(200, json=matches)
        return httpx.Response(405)


class FakeIdentity:
    """Stand-in for the password and refresh grants and the logout endpoint."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.refreshes = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/auth/v1/token" and request.url.params["grant_type"] == "refresh_token":
            body = json.loads(request.content)
            if body["refresh_token"] != f"ref-{self.refreshes + 1}":
                return httpx.Response(400, json={"error_description": "Invalid Refresh Token"})
            self.refreshes += 1
            return httpx.Response(
                200,
                json={
                    "access_token": f"tok-{self.refreshes + 1}",
                    "refresh_token": f"ref-{self.refreshes + 1}",
                    "expires_in": 3600,
                },
            )
        if request.url.path == "/auth/v1/token":
            body = json.loads(request.content)
            if body["password"] != "secret":
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(
                200,
                json={
                    "access_token": "tok-1",
                    "refresh_token": "ref-1",
                    "expires_in": 3600,
                    "user": {"id": "u1", "email": body["email"]},
                },
            )
        if request.url.path == "/auth/v1/logout":
            return httpx.Response(204)
        return httpx.Response(404)


@pytest.fixture
def temp_db():
    """Create a temporary SQLite gateway for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    gateway = create_sqlite_gateway(database_path=db_path)
    # Store the path for tests that need it
    gateway.database_path = db_path
    gateway.connect()

    yield gateway

    gateway.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def ledger(temp_db, clock):
    """Create a Ledger over a temporary database."""
    return Ledger(temp_db, clock=clock)


@pytest.fixture
def preference_store(tmp_path):
    return PreferenceStore(tmp_path / "preferences.json")


@pytest.fixture
def app_session(temp_db, preference_store):
    """Create a started AppSession over a temporary database."""
    session = AppSession(temp_db, LocalAuth(), preference_store)
    session.start()
    return session


@pytest.fixture
def postgrest():
    return FakePostgrest()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, tmp_path):
    """Global options pointing the CLI at the temporary database and home."""
    return [
        "--backend",
        "sqlite",
        "--db-path",
        temp_db.database_path,
        "--home",
        str(tmp_path / "home"),
    ]
