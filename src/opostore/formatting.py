"""Price coercion and display formatting."""

from __future__ import annotations

import math
import re
from typing import Any

_LEADING_FLOAT_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


def coerce_price(value: Any) -> float | int | None:
    """Return a numeric price, or ``None`` when *value* is not a number.

    Numeric strings are read by their leading number (``"1000"`` and
    ``"1000 won"`` both give ``1000``); placeholders such as
    ``"Contact for price"`` give ``None``.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_FLOAT_RE.match(value)
        if match is None:
            return None
        number = float(match.group(0))
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def parse_leading_int(text: Any) -> int | None:
    """Parse the leading integer of *text*; ``None`` when there is none."""
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text
    if isinstance(text, float):
        return int(text) if math.isfinite(text) else None
    if not isinstance(text, str):
        return None
    match = _LEADING_INT_RE.match(text)
    return int(match.group(0)) if match else None


def format_won(amount: Any, *, fallback: str = "N/A") -> str:
    """Format an amount as ``₩12,345``; non-numeric values pass through.

    ``None`` renders as *fallback*.
    """
    if amount is None:
        return fallback
    number = coerce_price(amount) if not isinstance(amount, str) else None
    if number is None:
        return str(amount)
    if isinstance(number, float) and number.is_integer():
        number = int(number)
    if isinstance(number, int):
        return f"₩{number:,}"
    return f"₩{number:,.2f}"


def format_badge_count(count: int, *, cap: int) -> str:
    return f"{cap}+" if count > cap else str(count)
