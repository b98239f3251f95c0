# certgen/utils/datetime.py

from __future__ import annotations

from datetime import datetime, timezone, timedelta
from typing import Literal

OutputFormat = Literal["openssl", "text", "compact"]

_FORMATS = {
    "openssl": "%Y%m%d%H%M%SZ",
    "text": "%b %d %H:%M:%S %Y UTC",
    "compact": "%H:%M %d %b %Y",
}


def _ensure_utc(dt: datetime) -> datetime:
    """
    Return a timezone-aware datetime in UTC.
    If `dt` is naive, treat it as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def format_datetime(date: datetime, output_format: OutputFormat = "openssl") -> str:
    """
    Format a datetime in UTC using one of certgen's canonical styles.

    Args:
        date: The datetime to format (naive treated as UTC).
        output_format: One of:
            - "openssl" → '%Y%m%d%H%M%SZ' (X.509 friendly)
            - "text"    → '%b %d %H:%M:%S %Y UTC'
            - "compact" → '%H:%M %d %b %Y'

    Returns:
        The formatted datetime string.

    Raises:
        ValueError: Unknown output format.
    """
    try:
        fmt = _FORMATS[output_format]
    except KeyError:
        raise ValueError(f"Invalid date format: {output_format!r}") from None

    return _ensure_utc(date).strftime(fmt)

def now_utc() -> datetime:
    """Return current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)

def validity_window(days: int, *, start: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Return the (not_before, not_after) pair for a validity of `days` days
    starting at `start` (default: now, UTC).
    """
    not_before = _ensure_utc(start) if start is not None else now_utc()
    return not_before, not_before + timedelta(days=days)
