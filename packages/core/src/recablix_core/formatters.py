"""Number formatting for Argentine locale.

Thousands are separated with a dot and decimals with a comma
(e.g. 1.234.567,89).
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

Number = Union[Decimal, int, float]

_SWAP_SEPARATORS = str.maketrans(",.", ".,")
CENTS = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _group(value: Decimal, places: int) -> str:
    """Format with es-AR separators and a fixed number of decimals."""
    quantum = Decimal(1).scaleb(-places)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{places}f}".translate(_SWAP_SEPARATORS)


def format_ars(value: Number, symbol: str = "$") -> str:
    """Format an amount as Argentine pesos.

    Example: format_ars(1234.56) -> "$ 1.234,56"
    """
    amount = _to_decimal(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {_group(abs(amount), 2)}"


def format_number(value: Number) -> str:
    """Format a number with thousands separators, up to three decimals.

    Example: format_number(1234567) -> "1.234.567"
    """
    text = _group(_to_decimal(value), 3)
    if "," in text:
        text = text.rstrip("0").rstrip(",")
    return text


def format_display_number(value: Optional[Number]) -> str:
    """Format for display with two decimals; empty for missing values.

    Example: format_display_number(1234567.89) -> "1.234.567,89"
    """
    if value is None:
        return ""
    return _group(_to_decimal(value), 2)


def format_display_integer(value: Optional[Number]) -> str:
    """Format rounded to units; empty for missing values.

    Example: format_display_integer(1234567) -> "1.234.567"
    """
    if value is None:
        return ""
    return _group(_to_decimal(value), 0)


def format_edit_number(value: Optional[Number]) -> str:
    """Format for editing: no thousands separator, decimal comma.

    Example: format_edit_number(1234567.89) -> "1234567,89"
    """
    if value is None:
        return ""
    amount = _to_decimal(value)
    if amount == amount.to_integral_value():
        return str(int(amount))
    return str(amount.normalize()).replace(".", ",")


def parse_input_number(text: str) -> Optional[Decimal]:
    """Parse a number typed in Argentine format.

    Example: parse_input_number("1.234.567,89") -> Decimal("1234567.89")

    Returns None for blank or unparseable input.
    """
    if not text or not text.strip():
        return None
    normalized = text.strip().replace(".", "").replace(",", ".", 1)
    try:
        number = Decimal(normalized)
    except InvalidOperation:
        return None
    # "NaN" and "Infinity" parse but are not amounts
    if not number.is_finite():
        return None
    return number


def sanitize_input(value: str) -> str:
    """Keep digits and a single decimal comma with at most two decimals.

    Example: sanitize_input("1234,567") -> "1234,56"
    """
    sanitized = re.sub(r"[^\d,]", "", value)
    parts = sanitized.split(",")
    if len(parts) > 2:
        sanitized = parts[0] + "," + "".join(parts[1:])
        parts = sanitized.split(",")
    if len(parts) == 2 and len(parts[1]) > 2:
        sanitized = parts[0] + "," + parts[1][:2]
    return sanitized


def format_period(period: str) -> str:
    """Format a YYYYMM period for display.

    Example: format_period("202501") -> "2025/01"
    """
    return f"{period[:4]}/{period[4:]}"


def format_percent(value: Optional[Number]) -> str:
    """Format a percentage with two decimals; "-" when missing."""
    if value is None:
        return "-"
    return f"{_group(_to_decimal(value), 2)}%"
