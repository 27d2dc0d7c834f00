"""UTC time helpers shared by the models and services."""

from datetime import date, datetime, time, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are taken to already be UTC; aware values are converted.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def coerce_calendar_date(value):
    """
    Turn a bare calendar date (date object or "YYYY-MM-DD") into midnight UTC.

    Anything else is returned untouched for pydantic to parse.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            parsed = date.fromisoformat(value.strip())
        except ValueError:
            return value
        return datetime.combine(parsed, time.min, tzinfo=timezone.utc)
    return value
