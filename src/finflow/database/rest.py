"""Gateway for a hosted Supabase (PostgREST) data store."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional

import httpx

from finflow.database.base import Gateway
from finflow.database.mappers import (
    debt_from_record,
    debt_to_record,
    transaction_from_record,
    transaction_to_record,
)
from finflow.domain.entities import Debt, DebtType, Transaction, TransactionType
from finflow.domain.errors import (
    NotFoundError,
    PersistenceError,
    debt_not_found,
    transaction_not_found,
)
from finflow.utils.logging_setup import get_logger

logger = get_logger(__name__)

TRANSACTIONS = "transactions"
DEBTS = "debts"

# Collection -> timestamp column used for newest-first listing
ORDER_COLUMNS = {
    TRANSACTIONS: "date",
    DEBTS: "created_at",
}


class SupabaseGateway(Gateway):
    """Talks to the ``/rest/v1`` endpoints of a Supabase project.

    Requests are authorised with the signed-in user's access token when a
    token provider is given and returns one, otherwise with the anon key.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[], Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the REST gateway.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co (trailing slash ignored)
            api_key: Anon key of the project
            token_provider: Callable returning the current access token, if any
            on_unauthorized: Callable that renews the session after a 401
            transport: Optional httpx transport (used by tests)
        """
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token or self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(base_url=f"{self.url}/rest/v1", transport=self._transport)
        return self._client

    def connect(self) -> None:
        self._get_client()

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _send(
        self,
        method: str,
        collection: str,
        params: Optional[dict[str, str]],
        payload: Optional[dict[str, Any]],
    ) -> httpx.Response:
        try:
            return self._get_client().request(
                method, f"/{collection}", params=params, json=payload, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.warning("%s /%s failed: %s", method, collection, e)
            raise PersistenceError(f"{method} {collection} failed: {e}") from e

    def _request(
        self,
        method: str,
        collection: str,
        params: Optional[dict[str, str]] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Issue one request and return the JSON array representation.

        A 401 is retried once after ``on_unauthorized`` has renewed the
        session.
        """
        logger.debug("%s /%s params=%s", method, collection, params)
        response = self._send(method, collection, params, payload)
        if response.status_code == 401 and self.on_unauthorized is not None:
            logger.info("%s /%s was unauthorized, renewing session", method, collection)
            self.on_unauthorized()
            response = self._send(method, collection, params, payload)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "%s /%s failed with status %s: %s",
                method, collection, e.response.status_code, e.response.text,
            )
            raise PersistenceError(
                f"{method} {collection} failed with status {e.response.status_code}"
            ) from e

        if not response.content:
            return []
        body = response.json()
        return body if isinstance(body, list) else [body]

    def _list(self, collection: str) -> list[dict[str, Any]]:
        return self._request("GET", collection, params={"order": f"{ORDER_COLUMNS[collection]}.desc"})

    def _create(self, collection: str, payload: dict[str, Any]) -> dict[str, Any]:
        rows = self._request("POST", collection, payload=payload)
        if not rows:
            raise PersistenceError(f"Store returned no {collection} record after insert")
        return rows[0]

    def _update(self, collection: str, record_id: str, payload: dict[str, Any], missing: str) -> dict[str, Any]:
        rows = self._request("PATCH", collection, params={"id": f"eq.{record_id}"}, payload=payload)
        if not rows:
            raise NotFoundError(missing)
        return rows[0]

    def _delete(self, collection: str, record_id: str, missing: str) -> None:
        rows = self._request("DELETE", collection, params={"id": f"eq.{record_id}"})
        if not rows:
            raise NotFoundError(missing)

    # Transaction operations
    def list_transactions(self) -> list[Transaction]:
        return [transaction_from_record(r) for r in self._list(TRANSACTIONS)]

    def create_transaction(
        self,
        amount: Decimal,
        type: TransactionType,
        category: str,
        date: datetime,
        note: str = "",
    ) -> Transaction:
        payload = transaction_to_record(
            amount=amount, type=type, category=category, note=note or "", date=date
        )
        return transaction_from_record(self._create(TRANSACTIONS, payload))

    def update_transaction(
        self,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        payload = transaction_to_record(amount=amount, type=type, category=category, note=note)
        record = self._update(
            TRANSACTIONS, transaction_id, payload, transaction_not_found(transaction_id)
        )
        return transaction_from_record(record)

    def delete_transaction(self, transaction_id: str) -> None:
        self._delete(TRANSACTIONS, transaction_id, transaction_not_found(transaction_id))

    # Debt operations
    def list_debts(self) -> list[Debt]:
        return [debt_from_record(r) for r in self._list(DEBTS)]

    def create_debt(
        self,
        person: str,
        amount: Decimal,
        type: DebtType,
        note: str = "",
    ) -> Debt:
        payload = debt_to_record(
            person=person,
            amount=amount,
            type=type,
            note=note or "",
            paid_amount=Decimal("0"),
            is_paid=False,
        )
        return debt_from_record(self._create(DEBTS, payload))

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
        payload = debt_to_record(
            person=person,
            amount=amount,
            type=type,
            note=note,
            paid_amount=paid_amount,
            is_paid=is_paid,
        )
        return debt_from_record(self._update(DEBTS, debt_id, payload, debt_not_found(debt_id)))

    def delete_debt(self, debt_id: str) -> None:
        self._delete(DEBTS, debt_id, debt_not_found(debt_id))
