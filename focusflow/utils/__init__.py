"""Utility modules for FocusFlow."""

from .datetime_utils import (
    get_local_tz,
    get_local_now,
    get_local_today,
    get_utc_now,
    to_aware_utc,
    to_naive_utc,
    day_bounds,
    get_week_start,
    week_days,
    days_until,
)

__all__ = [
    "get_local_tz",
    "get_local_now",
    "get_local_today",
    "get_utc_now",
    "to_aware_utc",
    "to_naive_utc",
    "day_bounds",
    "get_week_start",
    "week_days",
    "days_until",
]
