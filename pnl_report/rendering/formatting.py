"""
Amount Formatting

Amounts arrive as decimal strings. Parsing is lenient: the longest
numeric prefix is used ("12.5abc" -> 12.5) and anything without one
is treated as unparseable rather than raising.
"""

import re
from typing import Optional


_NUMBER_PREFIX = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "C$",
}


def parse_amount(value: Optional[str]) -> Optional[float]:
    """Numeric value of an amount string, or None if it has none."""
    if not value:
        return None
    match = _NUMBER_PREFIX.match(value)
    if not match:
        return None
    return float(match.group(0))


def currency_symbol(currency: str) -> str:
    """Printed prefix for a currency code. Unknown codes print as-is."""
    return CURRENCY_SYMBOLS.get(currency, currency)


def format_currency(value: Optional[str], currency: str = "CAD") -> str:
    """
    Format an amount for display, e.g. "-C$1,234.50".

    Empty input gives "". Unparseable input is returned unchanged.
    """
    if not value:
        return ""

    number = parse_amount(value)
    if number is None:
        return value

    formatted = f"{currency_symbol(currency)}{abs(number):,.2f}"
    return f"-{formatted}" if number < 0 else formatted


def format_percentage(value: Optional[str], base: float) -> str:
    """
    `value` as a percentage of `base`.

    Blank when base is zero or value is unparseable. Results within
    0.001 of 100 print as exactly "100%".
    """
    if not value or base == 0:
        return ""

    number = parse_amount(value)
    if number is None:
        return ""

    percentage = number / base * 100
    if abs(percentage - 100) < 0.001:
        return "100%"
    return f"{percentage:.2f}%"


def amount_or_zero(value: Optional[str]) -> float:
    """Numeric value of an amount, 0 when unparseable."""
    number = parse_amount(value)
    return number if number is not None else 0.0
