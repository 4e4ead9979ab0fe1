"""Field formatters for raw form input.

Pure, stateless functions that turn raw keystrokes into the canonical display
strings stored in the form snapshot. Malformed input is never an error here:
disallowed characters are dropped or the keystroke is rejected.

Usage:
    >>> format_currency("222262")
    'R$ 2.222,62'
    >>> format_phone("11999998888")
    '(11) 99999-8888'
"""

import re
from decimal import Decimal

from leadform.types import PHONE_DIGITS, ZERO_CURRENCY

_NON_DIGITS = re.compile(r"\D")

# Letters (accented Latin included), whitespace and . , ( ) / -
_FREE_TEXT = re.compile(r"[a-zA-ZÀ-ú\s.,()/-]*")

# Keys that would let exponent or sign notation into a digits-only input
NUMERIC_CONTROL_KEYS = frozenset({"e", "E", "+", "-", "."})

# str.format renders "1,234.56"; pt-BR swaps both separators
_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def digits_only(raw: str) -> str:
    """Strip every non-digit character from ``raw``."""
    return _NON_DIGITS.sub("", raw or "")


def format_currency(raw: str) -> str:
    """Render raw input as a BRL amount, reading the digits as cents.

    Callers pass the raw input value; every digit in it counts as a cent
    digit, whatever the separators around it.

    Examples:
        >>> format_currency("")
        'R$ 0,00'
        >>> format_currency("150")
        'R$ 1,50'
        >>> format_currency("R$ 1,505")
        'R$ 15,05'
    """
    digits = digits_only(raw)
    if not digits:
        return ZERO_CURRENCY
    # Exact for any number of digits
    amount = Decimal(f"{digits}E-2")
    return "R$ " + f"{amount:,.2f}".translate(_PT_BR_SEPARATORS)


def format_phone(raw: str) -> str:
    """Apply the ``(DD) DDDDD-DDDD`` mask to the digits typed so far.

    Extra digits beyond eleven are discarded. Each prefix of a phone number
    maps to exactly one partial mask.

    Examples:
        >>> format_phone("1")
        '(1'
        >>> format_phone("119")
        '(11) 9'
        >>> format_phone("(11) 99999-88881234")
        '(11) 99999-8888'
    """
    digits = digits_only(raw)[:PHONE_DIGITS]
    formatted = ""
    if len(digits) > 0:
        formatted = f"({digits[:2]}"
    if len(digits) >= 3:
        formatted += f") {digits[2:7]}"
    if len(digits) >= 8:
        formatted += f"-{digits[7:11]}"
    return formatted


def is_allowed_free_text(raw: str) -> bool:
    """Whether every character of ``raw`` belongs to the free-text charset."""
    return _FREE_TEXT.fullmatch(raw) is not None


def filter_free_text(raw: str, previous: str = "") -> str:
    """Accept ``raw`` unchanged, or keep ``previous`` if it holds a bad character.

    Examples:
        >>> filter_free_text("Logística / estoque")
        'Logística / estoque'
        >>> filter_free_text("Vendas 2", previous="Vendas ")
        'Vendas '
    """
    if is_allowed_free_text(raw):
        return raw
    return previous


def reject_numeric_control_key(key: str) -> bool:
    """True when ``key`` must be suppressed in a digits-only input."""
    return key in NUMERIC_CONTROL_KEYS


__all__ = [
    "NUMERIC_CONTROL_KEYS",
    "digits_only",
    "format_currency",
    "format_phone",
    "is_allowed_free_text",
    "filter_free_text",
    "reject_numeric_control_key",
]
