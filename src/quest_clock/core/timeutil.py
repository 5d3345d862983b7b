# src/quest_clock/core/timeutil.py

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_ts(value: datetime | None) -> float | None:
    if value is None:
        return None
    return ensure_utc(value).timestamp()


def from_ts(raw: float | None) -> datetime | None:
    if raw is None:
        return None
    return datetime.fromtimestamp(float(raw), UTC)


def parse_instant(raw: str) -> datetime:
    """Parse an ISO-8601 string (a trailing 'Z' is accepted) into an aware UTC datetime."""
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))
