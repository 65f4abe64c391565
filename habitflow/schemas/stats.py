from typing import Literal, Optional

from pydantic import BaseModel

StatsWindow = Literal["week", "month", "year"]


class StatsRow(BaseModel):
    habit_id: str
    name: str
    color: str
    count: int


class StatsOut(BaseModel):
    window: StatsWindow
    label: str
    rows: list[StatsRow]
    total: int
    top: Optional[StatsRow] = None
