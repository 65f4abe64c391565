import uuid
from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

DATE_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

DateKey = Annotated[str, Field(pattern=DATE_KEY_PATTERN)]
Category = Literal["health", "work", "sport", "general"]


class DailyFrequency(BaseModel):
    type: Literal["daily"] = "daily"


class WeekdaysFrequency(BaseModel):
    type: Literal["weekdays"] = "weekdays"


class WeekendsFrequency(BaseModel):
    type: Literal["weekends"] = "weekends"


class SpecificDaysFrequency(BaseModel):
    type: Literal["specific"] = "specific"
    days_of_week: list[Annotated[int, Field(ge=0, le=6)]] = Field(default_factory=list, alias="daysOfWeek")

    class Config:
        populate_by_name = True

    @property
    def is_empty(self) -> bool:
        return not self.days_of_week


class MonthlyFrequency(BaseModel):
    # No day-of-month rule yet; evaluated like daily.
    type: Literal["monthly"] = "monthly"


Frequency = Annotated[
    Union[DailyFrequency, WeekdaysFrequency, WeekendsFrequency, SpecificDaysFrequency, MonthlyFrequency],
    Field(discriminator="type"),
]


class Habit(BaseModel):
    id: str
    name: str
    color: str = "purple"
    category: Category = "general"
    frequency: Frequency = Field(default_factory=DailyFrequency)
    start_date: DateKey = Field(alias="startDate")
    end_date: Optional[DateKey] = Field(default=None, alias="endDate")
    exceptions: list[DateKey] = Field(default_factory=list)
    archived: bool = False

    class Config:
        populate_by_name = True

    @property
    def is_inactive(self) -> bool:
        return isinstance(self.frequency, SpecificDaysFrequency) and self.frequency.is_empty

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _HabitInput(BaseModel):
    name: str
    color: str = "purple"
    category: Category = "general"
    frequency: Frequency = Field(default_factory=DailyFrequency)

    class Config:
        populate_by_name = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @field_validator("frequency")
    @classmethod
    def specific_days_not_empty(cls, value):
        if isinstance(value, SpecificDaysFrequency) and value.is_empty:
            raise ValueError("pick at least one day of the week")
        return value


class HabitCreate(_HabitInput):
    id: Optional[str] = None
    start_date: Optional[DateKey] = Field(default=None, alias="startDate")

    def to_habit(self, today: Optional[date] = None) -> Habit:
        start = self.start_date or (today or date.today()).isoformat()
        return Habit(
            id=self.id or uuid.uuid4().hex,
            name=self.name,
            color=self.color,
            category=self.category,
            frequency=self.frequency,
            start_date=start,
        )


class HabitUpdate(_HabitInput):
    start_date: DateKey = Field(alias="startDate")
    archived: bool = False

    def apply_to(self, habit: Habit) -> Habit:
        return habit.model_copy(
            update={
                "name": self.name,
                "color": self.color,
                "category": self.category,
                "frequency": self.frequency,
                "start_date": self.start_date,
                "archived": self.archived,
            }
        )


class DateIn(BaseModel):
    date: DateKey

    @field_validator("date")
    @classmethod
    def real_calendar_day(cls, value: str) -> str:
        date.fromisoformat(value)
        return value
