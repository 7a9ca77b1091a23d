"""Scalar coercions shared by the normalizer and the resolvers."""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Union

from mcanswers.engine.values import MISSING, NESTED_SELECTION_KEYS, Kind, kind_of, probe_not_null

TRUTHY = frozenset({"correct", "right", "true", "yes", "y", "1", "pass"})
FALSY = frozenset({"incorrect", "wrong", "false", "no", "n", "0", "fail"})

_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def normalize_option_text(text: str) -> str:
    """Normalize option text for comparison: strip and lowercase."""
    return text.strip().lower()


def to_boolean(value: Any) -> Optional[bool]:
    """Interpret a stored correctness flag. ``None`` means unknown, not false."""
    kind = kind_of(value)
    if kind is Kind.BOOL:
        return value
    if kind is Kind.NUMBER:
        if value > 0:
            return True
        if value < 0:
            return False
        return None
    if kind is Kind.STRING:
        normalized = value.strip().lower()
        if normalized in TRUTHY:
            return True
        if normalized in FALSY:
            return False
    return None


def to_finite_number(value: Any) -> Optional[Union[int, float]]:
    """Parse a number or numeric string; non-finite or unparseable gives None.

    Integral values come back as ``int`` so they can be used as list positions.
    """
    kind = kind_of(value)
    if kind is Kind.NUMBER:
        number = value
    elif kind is Kind.STRING:
        text = value.strip()
        if not _NUMERIC_RE.match(text):
            return None
        number = float(text)
    else:
        return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def clean_text(value: Any) -> Optional[str]:
    """Trimmed text, or None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def stringify_id(value: Union[str, int, float]) -> str:
    """Render a selection id the way it was compared historically (1.0 -> "1")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def extract_selected_value(value: Any) -> Any:
    """Reduce a raw selection to a scalar id.

    A nested object such as ``{"id": "o2", "text": "Bravo"}`` yields its
    first non-null id-like alias. Returns ``MISSING`` when there is nothing
    usable, ``None`` when the selection was explicitly cleared.
    """
    if value is MISSING:
        return MISSING
    if kind_of(value) is Kind.OBJECT:
        candidate = probe_not_null(value, NESTED_SELECTION_KEYS)
        if kind_of(candidate) in (Kind.STRING, Kind.NUMBER):
            return candidate
        return MISSING
    if value is None:
        return None
    if kind_of(value) in (Kind.STRING, Kind.NUMBER):
        return value
    return MISSING
