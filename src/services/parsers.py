"""Parsing utilities for form input and backend payloads.

Handles the input formats the admin screens accept:
- Amounts typed with a dot decimal separator ("150.50") sent to the backend as cents
- Amounts edited in Brazilian format ("1.234,56") in the monthly expenses table
- Meter readings typed with either comma or dot as decimal separator
- Slip fees and gas unit price in either format ("1.250,00" or "12.5")
- Target months as "YYYY-MM"
- Backend dates, either plain strings or {"date": "..."} wrappers

Example:
    >>> parse_amount_to_cents("150.50")
    15050

    >>> parse_localized_amount_to_cents("1.234,56")
    123456

    >>> parse_reading("1520,5")
    Decimal('1520.5')

    >>> parse_target_month("2025-03")
    (2025, 3)
"""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
_READING_ALLOWED = re.compile(r"[^0-9,.]")
_TARGET_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def _to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_amount_to_cents(value: str | int | float | Decimal | None) -> int:
    """
    Parse a currency amount in reais and return integer cents.

    Args:
        value: Amount such as "150.50", 150.5 or Decimal("150.50")

    Returns:
        Amount in cents, rounded half up

    Raises:
        ValueError: If value is empty or not a number

    Examples:
        >>> parse_amount_to_cents("150.50")
        15050
        >>> parse_amount_to_cents(-20)
        -2000
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Amount is required")
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")

    try:
        amount = Decimal(str(value).strip())
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return _to_cents(amount)


def parse_localized_amount_to_cents(value: str | None) -> int:
    """
    Parse a Brazilian-formatted amount ("1.234,56") into cents.

    Dots are thousand separators and are removed; the comma becomes the
    decimal point.

    Raises:
        ValueError: If value is empty or not a number

    Examples:
        >>> parse_localized_amount_to_cents("1.234,56")
        123456
        >>> parse_localized_amount_to_cents("80")
        8000
    """
    if not value or not value.strip():
        raise ValueError("Amount is required")
    normalized = value.strip().replace(" ", "").replace("\xa0", "").replace(".", "").replace(",", ".")
    return parse_amount_to_cents(normalized)


def parse_fee_amount(value: str | None) -> Decimal:
    """
    Parse a slip setting (fee or unit price) typed as "1.250,00", "7,50" or "12.5".

    With a comma present the value is read in Brazilian format; otherwise the
    dot is the decimal separator. Blank means zero.

    Raises:
        ValueError: If a non-blank value is not a number

    Examples:
        >>> parse_fee_amount("1.250,00")
        Decimal('1250.00')
        >>> parse_fee_amount("12.5")
        Decimal('12.5')
    """
    if not value or not value.strip():
        return Decimal(0)
    text = value.strip().replace(" ", "").replace("\xa0", "")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        amount = Decimal(text)
    except (ValueError, InvalidOperation) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def parse_lenient_decimal(value: str | None) -> Decimal:
    """Parse a number typed with comma or dot decimals; anything unparseable is 0."""
    if not value:
        return Decimal(0)
    try:
        amount = Decimal(value.strip().replace(",", "."))
    except (ValueError, InvalidOperation):
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def sanitize_reading(value: str | None) -> str:
    """Strip everything but digits, commas and dots from a typed meter reading."""
    if not value:
        return ""
    return _READING_ALLOWED.sub("", value)


def parse_reading(value: str | None) -> Decimal:
    """
    Parse a meter reading as typed in the gas consumption form.

    Examples:
        >>> parse_reading("1520,5")
        Decimal('1520.5')
        >>> parse_reading("")
        Decimal('0')
        >>> parse_reading("abc")
        Decimal('0')
    """
    return parse_lenient_decimal(sanitize_reading(value))


def parse_target_month(value: str) -> tuple[int, int]:
    """
    Parse a "YYYY-MM" target month.

    Raises:
        ValueError: If the format is wrong or the month is outside 1..12
    """
    match = _TARGET_MONTH.match(value.strip()) if value else None
    if not match:
        raise ValueError(f"Invalid target month '{value}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in '{value}'")
    return year, month


def format_target_month(year: int, month: int) -> str:
    """Format year and month as "YYYY-MM"."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return f"{year:04d}-{month:02d}"


def parse_api_date(value: Any) -> date | None:
    """
    Parse a date sent by the backend.

    Accepts "YYYY-MM-DD", "YYYY-MM-DD HH:MM:SS[.ffffff]", ISO datetimes, date
    objects, and the {"date": "...", "timezone": "..."} wrapper some endpoints
    return.

    Raises:
        ValueError: If a non-empty value cannot be parsed
    """
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return parse_api_date(value.get("date"))
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Cannot parse date {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Cannot parse date '{value}': {e}") from e
