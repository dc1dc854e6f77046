"""Durable key-value storage for client-side state.

Holds the display-currency slot and the signed-in session slot in a single
JSON file under the finflow home directory.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from finflow.utils.logging_setup import get_logger

logger = get_logger(__name__)

CURRENCY_KEY = "ff_currency"
SESSION_KEY = "ff-auth"


def default_home() -> Path:
    """Return the finflow home directory.

    Checks FINFLOW_HOME environment variable, then defaults to ~/.finflow
    """
    home = os.environ.get("FINFLOW_HOME")
    if home:
        return Path(home)
    return Path.home() / ".finflow"


class PreferenceStore:
    """JSON-file backed key-value slots."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize preference store.

        Args:
            path: File holding the slots. Defaults to preferences.json in the
                finflow home directory.
        """
        self.path = Path(path) if path is not None else default_home() / "preferences.json"

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable preference file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Delete key if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
