"""Amount parsing utilities."""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "12.50"
    - "1,234.56"
    - "12.50 JOD" / "12.50 د.أ" (trailing currency text)
    - "$12.50"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()
    cleaned = re.sub(r"[$€£]|JOD|د\.أ", "", cleaned)
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return amount


def coerce_amount(value: Any) -> Decimal:
    """Turn a free-form form value into a Decimal, never raising.

    Blank, missing and malformed values become zero. This is the only
    conversion the aggregators use, so a bad keystroke can never break
    the totals.
    """
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else _ZERO
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of the binary expansion
        amount = Decimal(str(value))
        return amount if amount.is_finite() else _ZERO
    if isinstance(value, str):
        if not value.strip():
            return _ZERO
        try:
            return parse_amount(value)
        except ValueError:
            logger.debug("Ignoring malformed amount %r", value)
            return _ZERO
    logger.debug("Ignoring amount of unsupported type %s", type(value).__name__)
    return _ZERO
