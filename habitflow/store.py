"""In-memory habit collection and completion ledger.

The store owns all mutable state. Every public method takes the store lock,
so one instance can be shared by the API thread pool. Persistence happens
after each in-memory change and is not transactional with it: a failed write
is logged and the in-memory state stays updated.
"""
import copy
import json
import logging
import threading
from datetime import date
from typing import Any, Callable, Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from habitflow.dates import DateLike, MONDAY, parse_date_key, previous_day_key
from habitflow.recurrence import due_habits
from habitflow.schemas.habit import Habit
from habitflow.schemas.settings import StoreSettings
from habitflow.storage import RecordStorage

logger = logging.getLogger(__name__)

HABITS_KEY = "habitflow_habits"
COMPLETIONS_KEY = "habitflow_completions"
SETTINGS_KEY = "habitflow_settings"
RECORD_KEYS = (HABITS_KEY, COMPLETIONS_KEY, SETTINGS_KEY)

Ledger = dict[str, dict[str, bool]]
Observer = Callable[[tuple[str, ...]], None]

_habits_adapter = TypeAdapter(list[Habit])
_ledger_adapter = TypeAdapter(Ledger)


class HabitStore:
    def __init__(self, storage: RecordStorage, default_start_day_of_week: str = MONDAY) -> None:
        self.storage = storage
        self.default_settings = StoreSettings(start_day_of_week=default_start_day_of_week)
        self._habits: list[Habit] = []
        self._completions: Ledger = {}
        self._settings = self.default_settings.model_copy()
        self._observers: list[Observer] = []
        self._lock = threading.RLock()

    # ---------- persistence ----------

    def load(self) -> None:
        """Restore all three records. A broken record falls back to its default."""
        with self._lock:
            self._habits = self._load_record(HABITS_KEY, _habits_adapter.validate_python, [])
            self._completions = self._load_record(COMPLETIONS_KEY, _ledger_adapter.validate_python, {})
            self._settings = self._load_record(
                SETTINGS_KEY, StoreSettings.model_validate, self.default_settings.model_copy()
            )
            logger.info(
                "Loaded %d habits and %d ledger days (week starts on %s)",
                len(self._habits),
                len(self._completions),
                self._settings.start_day_of_week,
            )
        self._notify(RECORD_KEYS)

    def save(self) -> None:
        with self._lock:
            for key in RECORD_KEYS:
                self._persist(key)

    def _load_record(self, key: str, validate: Callable[[Any], Any], default: Any) -> Any:
        try:
            payload = self.storage.get(key)
        except Exception:
            logger.exception("Failed to read record %s, starting from an empty value", key)
            return default
        if not payload:
            return default
        try:
            return validate(json.loads(payload))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Record %s is malformed, starting from an empty value: %s", key, exc)
            return default

    def _serialize(self, key: str) -> str:
        if key == HABITS_KEY:
            data: Any = [habit.to_record() for habit in self._habits]
        elif key == COMPLETIONS_KEY:
            data = self._completions
        else:
            data = self._settings.model_dump(by_alias=True)
        return json.dumps(data, ensure_ascii=False)

    def _persist(self, key: str) -> None:
        try:
            self.storage.put(key, self._serialize(key))
        except Exception:
            logger.exception("Failed to persist record %s", key)

    def _commit(self, *keys: str) -> None:
        for key in keys:
            self._persist(key)
        self._notify(keys)

    # ---------- observers ----------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _notify(self, keys: Iterable[str]) -> None:
        changed = tuple(keys)
        for observer in list(self._observers):
            try:
                observer(changed)
            except Exception:
                logger.exception("Store observer %r failed", observer)

    # ---------- reads ----------

    @property
    def habits(self) -> list[Habit]:
        with self._lock:
            return [habit.model_copy(deep=True) for habit in self._habits]

    @property
    def completions(self) -> Ledger:
        with self._lock:
            return copy.deepcopy(self._completions)

    @property
    def start_day_of_week(self) -> str:
        with self._lock:
            return self._settings.start_day_of_week

    @property
    def settings(self) -> StoreSettings:
        with self._lock:
            return self._settings.model_copy()

    def snapshot(self) -> tuple[list[Habit], Ledger, StoreSettings]:
        with self._lock:
            return self.habits, self.completions, self.settings

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        with self._lock:
            index = self._index_of(habit_id)
            return None if index is None else self._habits[index].model_copy(deep=True)

    def is_completed(self, habit_id: str, date_key: str) -> bool:
        with self._lock:
            return bool(self._completions.get(date_key, {}).get(habit_id, False))

    def due_habits(self, value: Optional[DateLike] = None) -> list[Habit]:
        return due_habits(self.habits, value or date.today())

    @staticmethod
    def _valid_key(date_key: str, action: str) -> bool:
        try:
            parse_date_key(date_key)
        except ValueError:
            logger.warning("Ignoring %s for malformed date key %r", action, date_key)
            return False
        return True

    def _index_of(self, habit_id: str) -> Optional[int]:
        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                return index
        return None

    # ---------- mutations ----------

    def add_habit(self, habit: Habit) -> list[Habit]:
        with self._lock:
            if self._index_of(habit.id) is not None:
                logger.warning("Habit %s already exists, ignoring add", habit.id)
                return self.habits
            self._habits.append(habit.model_copy(deep=True))
            self._commit(HABITS_KEY)
            logger.info("Added habit %s (%s)", habit.id, habit.name)
            return self.habits

    def update_habit(self, habit: Habit) -> list[Habit]:
        with self._lock:
            index = self._index_of(habit.id)
            if index is None:
                logger.warning("Cannot update unknown habit %s", habit.id)
                return self.habits
            self._habits[index] = habit.model_copy(deep=True)
            self._commit(HABITS_KEY)
            return self.habits

    def delete_habit(self, habit_id: str) -> list[Habit]:
        # Completions of the deleted habit stay in the ledger as history.
        with self._lock:
            index = self._index_of(habit_id)
            if index is None:
                logger.warning("Cannot delete unknown habit %s", habit_id)
                return self.habits
            del self._habits[index]
            self._commit(HABITS_KEY)
            logger.info("Deleted habit %s", habit_id)
            return self.habits

    def toggle_completion(self, habit_id: str, date_key: str) -> bool:
        """Flip the completion flag and return the new value."""
        if not self._valid_key(date_key, "toggle"):
            return False
        with self._lock:
            if self._index_of(habit_id) is None:
                logger.warning("Cannot toggle unknown habit %s on %s", habit_id, date_key)
                return False
            day_record = self._completions.setdefault(date_key, {})
            day_record[habit_id] = not day_record.get(habit_id, False)
            self._commit(COMPLETIONS_KEY)
            return day_record[habit_id]

    def add_exception_for_date(self, habit_id: str, date_key: str) -> Optional[Habit]:
        """Skip one day of a habit and drop any completion recorded for it."""
        if not self._valid_key(date_key, "exception"):
            return None
        with self._lock:
            index = self._index_of(habit_id)
            if index is None:
                logger.warning("Cannot add exception for unknown habit %s", habit_id)
                return None

            habit = self._habits[index]
            changed: list[str] = []
            if date_key not in habit.exceptions:
                self._habits[index] = habit.model_copy(update={"exceptions": [*habit.exceptions, date_key]})
                changed.append(HABITS_KEY)

            day_record = self._completions.get(date_key)
            if day_record is not None and habit_id in day_record:
                del day_record[habit_id]
                changed.append(COMPLETIONS_KEY)

            if changed:
                self._commit(*changed)
            return self._habits[index].model_copy(deep=True)

    def stop_from_date(self, habit_id: str, date_key: str) -> Optional[Habit]:
        """End a habit on the day before `date_key`; earlier completions are kept."""
        if not self._valid_key(date_key, "stop"):
            return None
        end_date = previous_day_key(date_key)
        with self._lock:
            index = self._index_of(habit_id)
            if index is None:
                logger.warning("Cannot stop unknown habit %s", habit_id)
                return None

            self._habits[index] = self._habits[index].model_copy(update={"end_date": end_date})
            self._commit(HABITS_KEY)
            logger.info("Stopped habit %s from %s", habit_id, date_key)
            return self._habits[index].model_copy(deep=True)

    def set_start_day_of_week(self, value: str) -> StoreSettings:
        try:
            settings = StoreSettings(start_day_of_week=value)
        except ValidationError:
            logger.warning("Ignoring unknown start day of week %r", value)
            return self.settings
        with self._lock:
            self._settings = settings
            self._commit(SETTINGS_KEY)
            return self._settings.model_copy()
