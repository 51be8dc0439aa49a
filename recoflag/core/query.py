"""
Query parameter parsing for the landing page.

Two reserved parameters steer the page directly (``flagValue`` overrides the
recommendation id, ``accountValue`` picks the flag credential set). Every
other parameter becomes a visitor context entry, coerced to a boolean or a
number when its text reads as one.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable

from recoflag.config import get_logger
from recoflag.core.errors import InvalidInputError
from recoflag.core.models import ContextValue

logger = get_logger(__name__)

FLAG_VALUE_PARAM = "flagValue"
ACCOUNT_VALUE_PARAM = "accountValue"
RESERVED_PARAMS = frozenset({FLAG_VALUE_PARAM, ACCOUNT_VALUE_PARAM})

# Numeric literals as browsers read them with Number(): decimal with optional
# fraction/exponent, or an unsigned hex/octal/binary integer.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RADIX_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")

# Largest integer a double represents exactly
_MAX_SAFE_INT = 2**53


@dataclass
class LandingQuery:
    """Parsed landing page query."""

    flag_value: str | None = None
    account_value: str = ""
    context: dict[str, ContextValue] = field(default_factory=dict)


def parse_number(text: str) -> int | float | None:
    """Parse ``text`` as a numeric literal, or return None.

    Integral values come back as ``int`` so they serialize without a
    trailing ``.0``. Non-finite results are not numbers here.
    """
    stripped = text.strip()
    if not stripped:
        return None
    if _RADIX_RE.fullmatch(stripped):
        return int(stripped, 0)
    if not _DECIMAL_RE.fullmatch(stripped):
        return None
    number = float(stripped)
    if not math.isfinite(number):
        return None
    if number.is_integer() and abs(number) < _MAX_SAFE_INT:
        return int(number)
    return number


def coerce_context_value(value: str) -> ContextValue:
    """Coerce one query value into a context value."""
    if value == "true":
        return True
    if value == "false":
        return False
    number = parse_number(value)
    if number is not None:
        return number
    return value


def parse_landing_query(items: Iterable[tuple[str, str]]) -> LandingQuery:
    """Split ordered query pairs into override, account and context update.

    Reserved parameters take their first occurrence; for context keys the
    last occurrence wins. Empty pairs (a stray ``&=``) are skipped.

    Raises:
        InvalidInputError: If a value arrives under a blank name.
    """
    query = LandingQuery()
    seen_flag = seen_account = False

    for key, value in items:
        if key == FLAG_VALUE_PARAM:
            if not seen_flag:
                query.flag_value = value or None
                seen_flag = True
            continue
        if key == ACCOUNT_VALUE_PARAM:
            if not seen_account:
                query.account_value = value
                seen_account = True
            continue
        if not key.strip():
            if not value.strip():
                logger.debug("Skipping empty query pair")
                continue
            raise InvalidInputError(f"Context parameter with blank name: {key!r}")
        query.context[key] = coerce_context_value(value)

    return query
