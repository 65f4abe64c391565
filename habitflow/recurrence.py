from habitflow.dates import DateLike, local_date, parse_date_key, to_iso_date_key, weekday_from_sunday
from habitflow.schemas.habit import (
    DailyFrequency,
    Habit,
    MonthlyFrequency,
    SpecificDaysFrequency,
    WeekdaysFrequency,
    WeekendsFrequency,
)

WEEKDAYS = frozenset({1, 2, 3, 4, 5})
WEEKEND = frozenset({0, 6})


def is_due(habit: Habit, value: DateLike) -> bool:
    key = to_iso_date_key(value)

    if key in habit.exceptions:
        return False
    if habit.end_date and key > habit.end_date:
        return False
    if local_date(value) < parse_date_key(habit.start_date):
        return False
    if habit.archived:
        return False

    weekday = weekday_from_sunday(value)
    frequency = habit.frequency
    if isinstance(frequency, DailyFrequency):
        return True
    if isinstance(frequency, WeekdaysFrequency):
        return weekday in WEEKDAYS
    if isinstance(frequency, WeekendsFrequency):
        return weekday in WEEKEND
    if isinstance(frequency, SpecificDaysFrequency):
        if frequency.is_empty:
            return False
        return weekday in frequency.days_of_week
    if isinstance(frequency, MonthlyFrequency):
        # TODO: pick a day-of-month rule for monthly habits once the product defines one.
        return True
    return False


def due_habits(habits: list[Habit], value: DateLike) -> list[Habit]:
    return [habit for habit in habits if is_due(habit, value)]
