"""Password sign-in against the Supabase identity provider."""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from finflow.domain.errors import AuthenticationError, PersistenceError
from finflow.utils.logging_setup import get_logger
from finflow.utils.preferences import SESSION_KEY, PreferenceStore

logger = get_logger(__name__)

# Refresh this many seconds before the provider-reported expiry
EXPIRY_MARGIN_SECONDS = 30


@dataclass(frozen=True)
class AuthSession:
    """Signed-in user session."""

    access_token: str
    refresh_token: Optional[str]
    user_id: Optional[str]
    email: Optional[str]
    expires_at: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "user_id": self.user_id,
            "email": self.email,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            user_id=data.get("user_id"),
            email=data.get("email"),
            expires_at=data.get("expires_at"),
        )


class SupabaseAuth:
    """Signs users in and out and keeps the session in a durable slot.

    Access tokens are short-lived. A stored session past its expiry is
    exchanged for a new one with its refresh token before it is handed out.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        store: PreferenceStore,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.store = store
        self.clock = clock
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=f"{self.url}/auth/v1", transport=self._transport)

    def get_session(self) -> Optional[AuthSession]:
        """Return the stored session, or None when signed out."""
        data = self.store.get(SESSION_KEY)
        if not isinstance(data, dict) or "access_token" not in data:
            return None
        return AuthSession.from_dict(data)

    def access_token(self) -> Optional[str]:
        session = self.get_session()
        if session is None:
            return None
        if session.refresh_token and session.expires_at is not None:
            if self.clock() >= session.expires_at - EXPIRY_MARGIN_SECONDS:
                return self.refresh().access_token
        return session.access_token

    def _token_request(self, grant_type: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            with self._client() as client:
                return client.post(
                    "/token",
                    params={"grant_type": grant_type},
                    json=payload,
                    headers={"apikey": self.api_key, "Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            raise PersistenceError(f"Could not reach identity provider: {e}") from e

    def _store_session(
        self,
        response: httpx.Response,
        previous: Optional[AuthSession],
        email: Optional[str],
    ) -> AuthSession:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict) or not body.get("access_token"):
            raise AuthenticationError("Identity provider returned no access token")

        user = body.get("user") if isinstance(body.get("user"), dict) else {}
        expires_at = body.get("expires_at")
        if expires_at is None and body.get("expires_in") is not None:
            expires_at = int(self.clock()) + int(body["expires_in"])
        session = AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token") or (previous.refresh_token if previous else None),
            user_id=user.get("id") or (previous.user_id if previous else None),
            email=user.get("email") or email,
            expires_at=expires_at,
        )
        self.store.set(SESSION_KEY, session.to_dict())
        return session

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session and store it.

        Raises:
            AuthenticationError: With the provider's message when rejected,
                or when the provider answers without an access token
            PersistenceError: When the provider cannot be reached
        """
        response = self._token_request("password", {"email": email, "password": password})
        if response.status_code >= 400:
            raise AuthenticationError(_error_message(response))

        session = self._store_session(response, None, email)
        logger.info("Signed in as %s", session.email)
        return session

    def refresh(self) -> AuthSession:
        """Replace the stored session using its refresh token.

        The session slot is cleared when the provider refuses, so the user
        has to sign in again.

        Raises:
            AuthenticationError: If there is no refreshable session or the
                provider rejects the refresh token
            PersistenceError: When the provider cannot be reached
        """
        current = self.get_session()
        if current is None or not current.refresh_token:
            self.store.remove(SESSION_KEY)
            raise AuthenticationError("Session expired, please sign in again")

        response = self._token_request("refresh_token", {"refresh_token": current.refresh_token})
        if response.status_code >= 400:
            logger.warning("Session refresh rejected with status %s", response.status_code)
            self.store.remove(SESSION_KEY)
            raise AuthenticationError(_error_message(response))

        try:
            session = self._store_session(response, current, current.email)
        except AuthenticationError:
            self.store.remove(SESSION_KEY)
            raise
        logger.info("Refreshed session for %s", session.email)
        return session

    def sign_out(self) -> None:
        """Revoke the session remotely when possible and forget it locally."""
        session = self.get_session()
        if session is not None:
            try:
                with self._client() as client:
                    client.post(
                        "/logout",
                        headers={
                            "apikey": self.api_key,
                            "Authorization": f"Bearer {session.access_token}",
                        },
                    )
            except httpx.HTTPError as e:
                logger.warning("Remote sign-out failed, clearing local session anyway: %s", e)
        self.store.remove(SESSION_KEY)


class LocalAuth:
    """Identity provider for the local store: always signed in."""

    def get_session(self) -> Optional[AuthSession]:
        return AuthSession(access_token="local", refresh_token=None, user_id=None, email=None)

    def access_token(self) -> Optional[str]:
        return None

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        return self.get_session()

    def sign_out(self) -> None:
        pass


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Sign-in failed with status {response.status_code}"
    for key in ("error_description", "msg", "message", "error"):
        if isinstance(body, dict) and body.get(key):
            return str(body[key])
    return f"Sign-in failed with status {response.status_code}"
