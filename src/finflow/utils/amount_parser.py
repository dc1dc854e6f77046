"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Union

AmountInput = Union[str, int, float, Decimal]


def parse_amount(value: AmountInput) -> Decimal:
    """Parse user input into a finite Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "€ 1,234.56"

    Args:
        value: Amount as typed by the user, or an already numeric value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value is empty, not a number, NaN or infinite
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount {value!r}")

    if isinstance(value, (int, float, Decimal)):
        amount = Decimal(str(value))
    else:
        if value is None or not str(value).strip():
            raise ValueError("Empty amount string")

        amount_str = str(value).strip()

        # Remove currency symbols and codes
        amount_str = re.sub(r"[$€£¥]", "", amount_str)
        amount_str = re.sub(r"\s*(USD|COP|EUR)$", "", amount_str, flags=re.IGNORECASE)

        # Remove thousands separators
        amount_str = amount_str.replace(",", "").strip()

        try:
            amount = Decimal(amount_str)
        except InvalidOperation as e:
            raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e

    if not amount.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value!r}")
    return amount
