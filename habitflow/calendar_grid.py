"""Month and week grids for the calendar views."""
import calendar
from datetime import date, timedelta
from typing import Optional

from habitflow.dates import DateLike, MONDAY, local_date, to_iso_date_key, week_range, week_start_offset, weekday_from_sunday
from habitflow.schemas.calendar import CalendarDay

GRID_CELLS = 42  # 6 rows x 7 columns


def _cell(day: date, is_current_month: bool, today: str) -> CalendarDay:
    key = to_iso_date_key(day)
    return CalendarDay(date=day, date_str=key, is_current_month=is_current_month, is_today=key == today)


def month_grid(
    year: int,
    month: int,
    start_day_of_week: str = MONDAY,
    today: Optional[DateLike] = None,
) -> list[CalendarDay]:
    """Lay out a month as 42 cells.

    `month` is 0-based (0 = January). Values outside 0..11 roll over into
    the neighbouring years, so `month_grid(2024, 12)` is January 2025.
    """
    year, month = year + month // 12, month % 12 + 1
    today_key = to_iso_date_key(today or date.today())

    first_day = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    padding = week_start_offset(weekday_from_sunday(first_day), start_day_of_week)

    days: list[CalendarDay] = []
    for offset in range(padding, 0, -1):
        days.append(_cell(first_day - timedelta(days=offset), False, today_key))

    for number in range(days_in_month):
        days.append(_cell(first_day + timedelta(days=number), True, today_key))

    next_month = first_day + timedelta(days=days_in_month)
    for number in range(GRID_CELLS - len(days)):
        days.append(_cell(next_month + timedelta(days=number), False, today_key))

    return days


def week_grid(
    value: DateLike,
    start_day_of_week: str = MONDAY,
    today: Optional[DateLike] = None,
) -> list[CalendarDay]:
    reference = local_date(value)
    today_key = to_iso_date_key(today or date.today())
    start, _ = week_range(reference, start_day_of_week)

    days: list[CalendarDay] = []
    for number in range(7):
        day = start.date() + timedelta(days=number)
        # Dim spill-over days relative to the reference date's month.
        days.append(_cell(day, day.month == reference.month, today_key))
    return days
