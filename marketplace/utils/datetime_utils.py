"""Datetime helpers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (stored columns are UTC without tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
