import pytest

from habitflow.storage import MemoryRecordStorage
from habitflow.store import HabitStore


@pytest.fixture
def storage():
    return MemoryRecordStorage()


@pytest.fixture
def store(storage):
    store = HabitStore(storage)
    store.load()
    return store
