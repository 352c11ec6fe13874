"""Lenient conversions for values read back from the store.

Rows can be edited outside the app, so none of these raise: a value that
cannot be read falls back to the given default.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

Row = Dict[str, Any]


def as_text(value: Any) -> str:
    return "" if value is None else str(value)


def as_optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def as_optional_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def as_datetime(value: Any, default: Optional[datetime] = None) -> Optional[datetime]:
    """Aware datetime from a datetime or ISO string; naive values are taken as UTC."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return default
    if not isinstance(value, datetime):
        return default
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
