"""
Timestamps are stored as naive UTC datetimes and sent over the wire as
ISO-8601 strings with a trailing 'Z'.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    Accepts "2026-03-01", "2026-03-01T10:00" (both read as UTC) and offset
    forms such as "2026-03-01T10:00:00Z" or "...+06:00".

    Blank input gives None; anything else unparseable raises ValueError.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    return _as_naive_utc(datetime.fromisoformat(text))


def to_utc_z(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    stamp = _as_naive_utc(dt).replace(microsecond=0)
    return stamp.isoformat() + "Z"
