"""Normalization helpers.

Centralizes defensive parsing of vendor payload values.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def safe_int(value: Any) -> int | None:
    """Parse an integer that fits a signed 64-bit column; anything else is ``None``."""
    parsed = safe_float(value)
    if parsed is None:
        return None
    result = int(parsed)
    if not _INT64_MIN <= result <= _INT64_MAX:
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def strip_ip_prefix(value: Any) -> str | None:
    """Drop the leading ``/`` the push API puts in front of IP addresses."""
    text = safe_str(value)
    if text is None:
        return None
    text = text.lstrip("/")
    return text or None


def join_floor_labels(floors: Sequence[str] | str | None) -> str:
    """Collapse the AP floor labels into the single string stored per client.

    Labels are concatenated without a separator; a missing list yields ``""``.
    Some dashboards send the labels pre-joined as one string, which is kept
    as-is.
    """
    if floors is None:
        return ""
    if isinstance(floors, str):
        return floors
    return "".join(str(label) for label in floors if label is not None)
