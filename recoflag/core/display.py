"""
Display-time coercion for values received from upstream services.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

_NON_NUMERIC_RE = re.compile(r"[^\d.-]")
_LEADING_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_CLOCK_RE = re.compile(r"\d{2}:\d{2}:\d{2}")


def clean_price(price: Any) -> str:
    """Format a price for display, or return ``""`` if it isn't one.

    Strings lose every character except digits, ``.`` and ``-`` before the
    leading number is read, so ``"$1,299.00"`` shows as ``1,299``.
    """
    if isinstance(price, bool):
        return ""

    if isinstance(price, str):
        match = _LEADING_NUMBER_RE.match(_NON_NUMERIC_RE.sub("", price))
        if not match:
            return ""
        number = float(match.group(0))
    elif isinstance(price, (int, float)):
        try:
            number = float(price)
        except OverflowError:
            return ""
    else:
        return ""

    if not math.isfinite(number):
        return ""

    text = f"{number:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_log_timestamp(value: str) -> str:
    """Render a log timestamp as ``HH:MM:SS``.

    Clock strings pass through; ISO timestamps are converted; anything else
    shows the current time.
    """
    if _CLOCK_RE.fullmatch(value):
        return value
    try:
        return datetime.fromisoformat(value).strftime("%H:%M:%S")
    except ValueError:
        return datetime.now().strftime("%H:%M:%S")
