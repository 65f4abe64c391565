from datetime import date

from pydantic import BaseModel


class CalendarDay(BaseModel):
    date: date
    date_str: str
    is_current_month: bool
    is_today: bool

    class Config:
        frozen = True


class CalendarCellOut(BaseModel):
    date_str: str
    is_current_month: bool
    is_today: bool
    due: list[str]
    completed: list[str]


class CalendarOut(BaseModel):
    start_day_of_week: str
    days: list[CalendarCellOut]
