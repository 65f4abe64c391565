"""Calendar-day keys and week windows.

Every "same day?" comparison in the package goes through `to_iso_date_key`.
"""
from datetime import date, datetime, time, timedelta
from typing import Union

DateLike = Union[date, datetime]

MONDAY = "Monday"


def local_date(value: DateLike) -> date:
    """Strip the time part, converting aware datetimes to local time first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def to_iso_date_key(value: DateLike) -> str:
    return local_date(value).isoformat()


def parse_date_key(key: str) -> date:
    """Parse a `YYYY-MM-DD` key; raises ValueError for anything else."""
    if not isinstance(key, str) or len(key) != 10:
        raise ValueError(f"invalid date key: {key!r}")
    return date.fromisoformat(key)


def weekday_from_sunday(value: DateLike) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (local_date(value).weekday() + 1) % 7


def previous_day_key(key: str) -> str:
    return (parse_date_key(key) - timedelta(days=1)).isoformat()


def week_start_offset(weekday: int, start_day_of_week: str) -> int:
    """Days to step back from a 0=Sunday weekday to reach the window start."""
    if start_day_of_week == MONDAY:
        return 6 if weekday == 0 else weekday - 1
    return weekday


def week_range(value: DateLike, start_day_of_week: str) -> tuple[datetime, datetime]:
    day = local_date(value)
    start_day = day - timedelta(days=week_start_offset(weekday_from_sunday(day), start_day_of_week))
    start = datetime.combine(start_day, time.min)
    end = datetime.combine(start_day + timedelta(days=6), time.max)
    return start, end
