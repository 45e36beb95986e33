"""Timezone-aware time helpers."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp(now: datetime | None = None) -> str:
    """Return an ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = (now or utc_now()).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO 8601 timestamp written by :func:`utc_timestamp`.

    Returns None when ``value`` is not a parseable timestamp.
    """
    text = str(value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = ["utc_now", "utc_timestamp", "parse_timestamp"]
