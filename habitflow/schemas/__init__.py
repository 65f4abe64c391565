from habitflow.schemas.calendar import CalendarCellOut, CalendarDay, CalendarOut
from habitflow.schemas.habit import (
    DailyFrequency,
    DateIn,
    Frequency,
    Habit,
    HabitCreate,
    HabitUpdate,
    MonthlyFrequency,
    SpecificDaysFrequency,
    WeekdaysFrequency,
    WeekendsFrequency,
)
from habitflow.schemas.settings import StartDayOfWeek, StoreSettings
from habitflow.schemas.stats import StatsOut, StatsRow, StatsWindow

__all__ = [
    "CalendarDay",
    "CalendarCellOut",
    "CalendarOut",
    "Frequency",
    "DailyFrequency",
    "WeekdaysFrequency",
    "WeekendsFrequency",
    "SpecificDaysFrequency",
    "MonthlyFrequency",
    "Habit",
    "HabitCreate",
    "HabitUpdate",
    "DateIn",
    "StartDayOfWeek",
    "StoreSettings",
    "StatsWindow",
    "StatsRow",
    "StatsOut",
]
