from typing import Optional

from habitflow.config import settings
from habitflow.db import SessionLocal
from habitflow.storage import SqlRecordStorage
from habitflow.store import HabitStore

_store: Optional[HabitStore] = None


def get_store() -> HabitStore:
    global _store
    if _store is None:
        _store = HabitStore(SqlRecordStorage(SessionLocal), settings.DEFAULT_START_DAY_OF_WEEK)
        _store.load()
    return _store
