"""Application session: the explicit context shared by all operations.

A session is initialized once the identity provider reports a signed-in
user (collections are loaded) and torn down on sign-out (collections are
cleared).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Union

from finflow.domain.currency import CurrencyPreference, format_value
from finflow.domain.entities import Currency
from finflow.domain.errors import AuthenticationError
from finflow.domain.ledger import Ledger
from finflow.utils.logging_setup import get_logger
from finflow.utils.preferences import PreferenceStore

if TYPE_CHECKING:
    from finflow.database.auth import AuthSession, LocalAuth, SupabaseAuth
    from finflow.database.base import Gateway

logger = get_logger(__name__)


class AppSession:
    """Ledger, identity and display preferences for one user."""

    def __init__(
        self,
        gateway: Gateway,
        auth: Union[SupabaseAuth, LocalAuth],
        store: PreferenceStore,
        record_full_payment: bool = False,
    ):
        self.gateway = gateway
        self.auth = auth
        self.ledger = Ledger(gateway, record_full_payment=record_full_payment)
        self.currency_preference = CurrencyPreference(store)
        self.currency: Currency = self.currency_preference.load()
        self.user: Optional[AuthSession] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def start(self) -> bool:
        """Load the ledger if a signed-in session exists.

        Returns:
            True when a session was found and the collections were loaded
        """
        self.user = self.auth.get_session()
        if self.user is None:
            self.ledger.clear()
            return False
        self.gateway.connect()
        self.ledger.load()
        return True

    def require_user(self) -> None:
        """Raise AuthenticationError unless the session has been started."""
        if not self.is_authenticated:
            raise AuthenticationError("Not signed in. Run 'finflow login' first.")

    def sign_in(self, email: str, password: str) -> None:
        """Sign in and load the collections.

        Raises:
            AuthenticationError: If the identity provider rejects the credentials
        """
        self.auth.sign_in_with_password(email, password)
        self.start()

    def sign_out(self) -> None:
        """Sign out and drop both collections."""
        self.auth.sign_out()
        self.user = None
        self.ledger.clear()
        logger.info("Signed out")

    def close(self) -> None:
        self.gateway.disconnect()

    # Display currency
    def set_currency(self, currency: Union[Currency, str]) -> Currency:
        """Change and persist the display currency."""
        self.currency = self.currency_preference.save(currency)
        return self.currency

    def format(self, value: Decimal) -> str:
        """Format an amount in the current display currency."""
        return format_value(value, self.currency)
