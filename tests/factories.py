from habitflow.schemas import DailyFrequency, Habit


def make_habit(habit_id="h1", name="Stretch", start_date="2024-01-01", **fields) -> Habit:
    fields.setdefault("frequency", DailyFrequency())
    return Habit(id=habit_id, name=name, start_date=start_date, **fields)
