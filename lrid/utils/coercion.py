"""Scalar coercion helpers shared by the normalizer and the rule evaluator.

Answers arrive from the intake layer as strings, numbers, booleans or null.
Both helpers are total: they return ``None`` instead of raising.
"""

from __future__ import annotations

import math
from typing import Any


def as_number(value: Any) -> float | None:
    """Return ``value`` as a finite float, or None if it is not numeric.

    Numeric strings (``"4"``, ``" 3.5 "``) are accepted.  Booleans are not
    numbers here: a ``True`` answer never counts as Likert 1.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # Integers beyond float range are not a plausible answer.
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def as_text(value: Any) -> str:
    """Canonical text form used for choice look-ups and equality tests.

    ``1``, ``1.0`` and ``"1"`` all map to ``"1"``; booleans map to
    ``"true"`` / ``"false"``; None maps to the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return str(value)


def round_score(value: float | None, ndigits: int = 2) -> float | None:
    """Round for display stability, passing None through."""
    if value is None:
        return None
    return round(value, ndigits)
