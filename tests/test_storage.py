import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from habitflow.crud import get_record, put_record
from habitflow.db import _normalize_database_url, make_session_factory
from habitflow.models import Base
from habitflow.storage import SqlRecordStorage
from habitflow.store import HabitStore
from tests.factories import make_habit


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()


def test_put_and_get_record(session_factory):
    with session_factory() as db:
        assert get_record(db, "habitflow_habits") is None
        put_record(db, "habitflow_habits", "[]")
        put_record(db, "habitflow_habits", '[{"id": "h1"}]')
        assert get_record(db, "habitflow_habits") == '[{"id": "h1"}]'


def test_store_round_trip_through_database(session_factory):
    store = HabitStore(SqlRecordStorage(session_factory))
    store.load()
    store.add_habit(make_habit("h1"))
    store.toggle_completion("h1", "2024-01-02")

    reloaded = HabitStore(SqlRecordStorage(session_factory))
    reloaded.load()
    assert [h.id for h in reloaded.habits] == ["h1"]
    assert reloaded.is_completed("h1", "2024-01-02")


def test_missing_table_loads_empty_store():
    engine = create_engine("sqlite://", future=True, poolclass=StaticPool)
    store = HabitStore(SqlRecordStorage(make_session_factory(engine)))
    store.load()
    assert store.habits == []
    assert store.start_day_of_week == "Monday"


def test_postgres_urls_are_normalized():
    assert _normalize_database_url("postgres://u:p@h/db") == "postgresql+psycopg://u:p@h/db"
    assert _normalize_database_url(" sqlite:///./x.db ") == "sqlite:///./x.db"
