from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def utcnow_iso() -> str:
    """Current UTC time as ISO-8601 string with Z."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def iso_date(value: Any) -> str:
    """Normalize a date / datetime / "YYYY-MM-DD..." string to "YYYY-MM-DD".

    Raises ValueError("invalid_date") for anything else.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except ValueError:
        raise ValueError("invalid_date")
