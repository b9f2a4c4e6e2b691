"""
Centralized datetime and timezone utilities.

Day boundaries and week starts are computed in the configured local
timezone with explicit midnight truncation, so DST transitions never shift
a day by an hour.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple, Union
import pytz

from config import settings


def get_local_tz() -> pytz.BaseTzInfo:
    """Get the configured local timezone."""
    return pytz.timezone(settings.timezone)


def get_local_now() -> datetime:
    """Get current time in local timezone (aware)."""
    return datetime.now(get_local_tz())


def get_local_today() -> date:
    """Get today's date in the local timezone."""
    return get_local_now().date()


def get_utc_now() -> datetime:
    """Current instant as naive UTC, the storage format for timestamps."""
    return datetime.now(pytz.UTC).replace(tzinfo=None)


def to_aware_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to timezone-aware UTC.

    Naive datetimes are assumed to already be UTC, which is how calendar
    instants are stored.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(pytz.UTC)

    return pytz.UTC.localize(dt)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert any datetime to naive UTC for database storage.

    PostgreSQL TIMESTAMP WITHOUT TIME ZONE expects naive datetimes.
    """
    if dt is None:
        return None
    return to_aware_utc(dt).replace(tzinfo=None)


def day_bounds(day: date, tz: Optional[pytz.BaseTzInfo] = None) -> Tuple[datetime, datetime]:
    """
    Get the first and last instant of a local calendar day.

    Args:
        day: Calendar date
        tz: Timezone (defaults to the configured one)

    Returns:
        (start, end) aware datetimes; end is the last microsecond of the day
    """
    tz = tz or get_local_tz()
    start = tz.localize(datetime.combine(day, time.min))
    next_start = tz.localize(datetime.combine(day + timedelta(days=1), time.min))
    end = tz.normalize(next_start - timedelta(microseconds=1))
    return start, end


def get_week_start(value: Union[date, datetime, None] = None) -> date:
    """
    Get the Monday of the week containing `value`.

    Aware datetimes are first converted to the local timezone.
    """
    if value is None:
        value = get_local_now()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(get_local_tz())
        value = value.date()

    return value - timedelta(days=value.weekday())


def week_days(week_start: date, days: int = 7) -> List[date]:
    """List the calendar dates of a week starting at `week_start`."""
    return [week_start + timedelta(days=i) for i in range(days)]


def days_until(start: date, end: Union[date, datetime]) -> int:
    """Whole days from `start` to `end` (negative when `end` is earlier)."""
    if isinstance(end, datetime):
        end = end.date()
    return (end - start).days
