from typing import Literal

from pydantic import BaseModel, Field

StartDayOfWeek = Literal["Sunday", "Monday"]


class StoreSettings(BaseModel):
    start_day_of_week: StartDayOfWeek = Field(default="Monday", alias="startDayOfWeek")

    class Config:
        populate_by_name = True
