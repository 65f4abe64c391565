import logging
from datetime import datetime
from typing import Iterable, Optional

from habitflow.dates import DateLike, MONDAY, local_date, parse_date_key, to_iso_date_key, week_range
from habitflow.schemas.habit import Habit
from habitflow.schemas.stats import StatsOut, StatsRow

logger = logging.getLogger(__name__)

WINDOWS = ("week", "month", "year")


def _window_filter(window: str, start_day_of_week: str, now: DateLike):
    today = local_date(now)
    if window == "week":
        start, end = week_range(today, start_day_of_week)
        start_key, end_key = to_iso_date_key(start), to_iso_date_key(end)
        return lambda key: start_key <= key <= end_key
    if window == "month":
        return lambda key: _year_month(key) == (today.year, today.month)
    if window == "year":
        return lambda key: _year_month(key)[0] == today.year
    raise ValueError(f"unknown stats window: {window!r}")


def _year_month(key: str) -> tuple[int, int]:
    try:
        day = parse_date_key(key)
    except ValueError:
        logger.warning("Skipping malformed ledger key %r", key)
        return 0, 0
    return day.year, day.month


def aggregate(
    ledger: dict[str, dict[str, bool]],
    window: str,
    *,
    start_day_of_week: str = MONDAY,
    now: Optional[DateLike] = None,
    habits: Optional[Iterable[Habit]] = None,
) -> dict[str, int]:
    """Count completed days per habit id inside `window`, anchored at `now`.

    When `habits` is given, ids of inactive habits (specific days with no day
    picked) are left out of the result.
    """
    include = _window_filter(window, start_day_of_week, now or datetime.now())

    counts: dict[str, int] = {}
    for date_key, day_record in ledger.items():
        if not include(date_key):
            continue
        for habit_id, done in day_record.items():
            if done:
                counts[habit_id] = counts.get(habit_id, 0) + 1

    if habits is not None:
        inactive = {habit.id for habit in habits if habit.is_inactive}
        counts = {habit_id: count for habit_id, count in counts.items() if habit_id not in inactive}
    return counts


def window_label(window: str, now: DateLike) -> str:
    today = local_date(now)
    if window == "year":
        return f"Year {today.year}"
    if window == "month":
        return today.strftime("%B %Y")
    return "This Week"


def build_report(
    habits: list[Habit],
    ledger: dict[str, dict[str, bool]],
    window: str,
    *,
    start_day_of_week: str = MONDAY,
    now: Optional[DateLike] = None,
) -> StatsOut:
    now = now or datetime.now()
    # Total covers every counted id, including inactive and deleted habits.
    counts = aggregate(ledger, window, start_day_of_week=start_day_of_week, now=now)

    rows = [
        StatsRow(habit_id=habit.id, name=habit.name, color=habit.color, count=counts.get(habit.id, 0))
        for habit in habits
        if not habit.is_inactive
    ]
    rows.sort(key=lambda row: row.count, reverse=True)

    return StatsOut(
        window=window,
        label=window_label(window, now),
        rows=rows,
        total=sum(counts.values()),
        top=rows[0] if rows else None,
    )
