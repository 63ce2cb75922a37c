from __future__ import annotations

"""Utility helpers for catalog records."""

import time
from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def to_iso_datetime(value: str | None, tz: str | None = None) -> str | None:
    """Return an ISO8601 string with timezone offset.

    Parameters
    ----------
    value:
        Input date or datetime string. Accepts ``YYYY-MM-DD`` or
        ``YYYY-MM-DDTHH:MM:SS`` forms (a trailing ``Z`` is accepted).
        ``None`` values return ``None``.
    tz:
        Optional IANA timezone name used when ``value`` is naive.  Defaults
        to UTC.

    Raises ``ValueError`` when ``value`` cannot be parsed.
    """
    if not value:
        return None

    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    if "T" in value or " " in value:
        dt = datetime.fromisoformat(value)
    else:
        y, m, d = map(int, value.split("-"))
        dt = datetime(y, m, d)

    if dt.tzinfo is None:
        zone = ZoneInfo(tz) if tz else ZoneInfo("UTC")
        dt = dt.replace(tzinfo=zone)

    return dt.isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_event_id() -> str:
    """Create an identifier from the current time in milliseconds."""
    return str(time.time_ns() // 1_000_000)


def placeholder_image_url(seed: str) -> str:
    return f"https://picsum.photos/800/600?random={seed}"
