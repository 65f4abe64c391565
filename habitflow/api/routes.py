from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from habitflow.api.deps import get_store
from habitflow.calendar_grid import month_grid, week_grid
from habitflow.dates import parse_date_key, to_iso_date_key
from habitflow.recurrence import is_due
from habitflow.schemas import (
    CalendarCellOut,
    CalendarDay,
    CalendarOut,
    DateIn,
    Habit,
    HabitCreate,
    HabitUpdate,
    StatsOut,
    StoreSettings,
)
from habitflow.stats import WINDOWS, build_report
from habitflow.store import HabitStore

router = APIRouter(prefix="/v1", tags=["habits"])


def _parse_date_or_400(raw: Optional[str]) -> date:
    if not raw:
        return date.today()
    try:
        return parse_date_key(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD") from exc


def _habits_out(habits: List[Habit]) -> List[Dict[str, Any]]:
    return [habit.to_record() for habit in habits]


def _calendar_out(store: HabitStore, days: List[CalendarDay]) -> CalendarOut:
    habits, completions, settings = store.snapshot()
    cells = []
    for day in days:
        day_record = completions.get(day.date_str, {})
        cells.append(
            CalendarCellOut(
                date_str=day.date_str,
                is_current_month=day.is_current_month,
                is_today=day.is_today,
                due=[habit.id for habit in habits if is_due(habit, day.date)],
                completed=[habit_id for habit_id, done in day_record.items() if done],
            )
        )
    return CalendarOut(start_day_of_week=settings.start_day_of_week, days=cells)


@router.get("/habits")
def list_habits(store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    habits = store.habits
    return {"count": len(habits), "items": _habits_out(habits)}


@router.post("/habits", status_code=201)
def create_habit(payload: HabitCreate, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    habit = payload.to_habit()
    if store.get_habit(habit.id):
        raise HTTPException(status_code=409, detail="habit id already exists")
    store.add_habit(habit)
    return habit.to_record()


@router.put("/habits/{habit_id}")
def update_habit(habit_id: str, payload: HabitUpdate, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    habit = store.get_habit(habit_id)
    if habit:
        store.update_habit(payload.apply_to(habit))
    return {"items": _habits_out(store.habits)}


@router.delete("/habits/{habit_id}")
def delete_habit(habit_id: str, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    return {"items": _habits_out(store.delete_habit(habit_id))}


@router.post("/habits/{habit_id}/toggle")
def toggle_completion(habit_id: str, payload: DateIn, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    completed = store.toggle_completion(habit_id, payload.date)
    return {"habit_id": habit_id, "date": payload.date, "completed": completed}


@router.post("/habits/{habit_id}/exceptions")
def add_exception(habit_id: str, payload: DateIn, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    habit = store.add_exception_for_date(habit_id, payload.date)
    return {"habit": habit.to_record() if habit else None}


@router.post("/habits/{habit_id}/stop")
def stop_habit(habit_id: str, payload: DateIn, store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    habit = store.stop_from_date(habit_id, payload.date)
    return {"habit": habit.to_record() if habit else None}


@router.get("/due")
def due_on_date(day_key: Optional[str] = Query(default=None, alias="date"), store: HabitStore = Depends(get_store)) -> Dict[str, Any]:
    day = _parse_date_or_400(day_key)
    key = to_iso_date_key(day)
    return {
        "date": key,
        "items": [
            {"habit": habit.to_record(), "completed": store.is_completed(habit.id, key)}
            for habit in store.due_habits(day)
        ],
    }


@router.get("/calendar/month", response_model=CalendarOut)
def calendar_month(
    year: Optional[int] = None,
    month: Optional[int] = None,
    store: HabitStore = Depends(get_store),
) -> CalendarOut:
    today = date.today()
    year = today.year if year is None else year
    month = today.month - 1 if month is None else month
    if not 0 <= month <= 11:
        raise HTTPException(status_code=400, detail="month must be in range 0..11")
    return _calendar_out(store, month_grid(year, month, store.start_day_of_week))


@router.get("/calendar/week", response_model=CalendarOut)
def calendar_week(day_key: Optional[str] = Query(default=None, alias="date"), store: HabitStore = Depends(get_store)) -> CalendarOut:
    day = _parse_date_or_400(day_key)
    return _calendar_out(store, week_grid(day, store.start_day_of_week))


@router.get("/stats", response_model=StatsOut)
def stats(window: str = "month", store: HabitStore = Depends(get_store)) -> StatsOut:
    if window not in WINDOWS:
        raise HTTPException(status_code=400, detail="window must be week, month or year")
    habits, completions, settings = store.snapshot()
    return build_report(habits, completions, window, start_day_of_week=settings.start_day_of_week)


@router.get("/settings")
def get_settings(store: HabitStore = Depends(get_store)) -> Dict[str, str]:
    return store.settings.model_dump(by_alias=True)


@router.put("/settings")
def put_settings(payload: StoreSettings, store: HabitStore = Depends(get_store)) -> Dict[str, str]:
    return store.set_start_day_of_week(payload.start_day_of_week).model_dump(by_alias=True)
