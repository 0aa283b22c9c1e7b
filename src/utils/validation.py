"""Validation helpers for decoded JSON payloads."""

from __future__ import annotations

import math
from typing import Any


def missing_keys(record: dict[str, Any], required: set[str]) -> list[str]:
    return sorted(key for key in required if record.get(key) in (None, ""))


def to_float(value: Any) -> float | None:
    """Coerce JSON numbers and numeric strings to float; ``None`` when not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
