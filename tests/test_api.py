import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from habitflow.api import router
from habitflow.api.deps import get_store
from habitflow.storage import MemoryRecordStorage
from habitflow.store import HabitStore


@pytest.fixture
def api_store():
    store = HabitStore(MemoryRecordStorage())
    store.load()
    return store


@pytest.fixture
def client(api_store):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_store] = lambda: api_store
    return TestClient(app)


def _create(client, **body):
    body.setdefault("startDate", "2024-01-01")
    response = client.post("/v1/habits", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_habits(client):
    created = _create(client, id="h1", name="  Read  ", frequency={"type": "specific", "daysOfWeek": [1, 3, 5]})
    assert created["name"] == "Read"
    assert created["frequency"] == {"type": "specific", "daysOfWeek": [1, 3, 5]}

    listed = client.get("/v1/habits").json()
    assert listed["count"] == 1


def test_create_generates_id(client):
    created = _create(client, name="Walk")
    assert len(created["id"]) == 32


def test_create_rejects_invalid_input(client):
    assert client.post("/v1/habits", json={"name": " "}).status_code == 422
    bad_days = {"name": "Gym", "frequency": {"type": "specific", "daysOfWeek": []}}
    assert client.post("/v1/habits", json=bad_days).status_code == 422


def test_create_rejects_duplicate_id(client):
    _create(client, id="h1", name="Read")
    assert client.post("/v1/habits", json={"id": "h1", "name": "Again"}).status_code == 409


def test_toggle_and_due(client):
    _create(client, id="h1", name="Read", frequency={"type": "weekdays"})

    toggled = client.post("/v1/habits/h1/toggle", json={"date": "2024-01-08"}).json()
    assert toggled["completed"] is True

    due = client.get("/v1/due", params={"date": "2024-01-08"}).json()
    assert [(item["habit"]["id"], item["completed"]) for item in due["items"]] == [("h1", True)]
    assert client.get("/v1/due", params={"date": "2024-01-07"}).json()["items"] == []


def test_unknown_habit_mutations_are_noops(client):
    assert client.post("/v1/habits/nope/toggle", json={"date": "2024-01-08"}).json()["completed"] is False
    assert client.post("/v1/habits/nope/exceptions", json={"date": "2024-01-08"}).json() == {"habit": None}
    assert client.delete("/v1/habits/nope").json() == {"items": []}


def test_invalid_dates(client):
    assert client.get("/v1/due", params={"date": "2024-02-30"}).status_code == 400
    assert client.post("/v1/habits/h1/toggle", json={"date": "2024-02-30"}).status_code == 422


def test_exception_and_stop(client):
    _create(client, id="h1", name="Read")
    client.post("/v1/habits/h1/toggle", json={"date": "2024-03-05"})

    habit = client.post("/v1/habits/h1/exceptions", json={"date": "2024-03-05"}).json()["habit"]
    assert habit["exceptions"] == ["2024-03-05"]

    habit = client.post("/v1/habits/h1/stop", json={"date": "2024-03-10"}).json()["habit"]
    assert habit["endDate"] == "2024-03-09"


def test_update_habit(client):
    _create(client, id="h1", name="Read")
    response = client.put("/v1/habits/h1", json={"name": "Read more", "startDate": "2024-02-01", "archived": True})
    item = response.json()["items"][0]
    assert item["name"] == "Read more"
    assert item["archived"] is True


def test_month_calendar(client):
    _create(client, id="h1", name="Read", frequency={"type": "weekdays"})
    client.post("/v1/habits/h1/toggle", json={"date": "2024-02-01"})

    days = client.get("/v1/calendar/month", params={"year": 2024, "month": 1}).json()["days"]
    assert len(days) == 42
    assert days[3]["date_str"] == "2024-02-01"
    assert days[3]["due"] == ["h1"]
    assert days[3]["completed"] == ["h1"]
    assert client.get("/v1/calendar/month", params={"year": 2024, "month": 12}).status_code == 400


def test_week_calendar_follows_settings(client):
    assert client.put("/v1/settings", json={"startDayOfWeek": "Sunday"}).json() == {"startDayOfWeek": "Sunday"}
    body = client.get("/v1/calendar/week", params={"date": "2024-03-13"}).json()
    assert body["start_day_of_week"] == "Sunday"
    assert [d["date_str"] for d in body["days"]][0] == "2024-03-10"
    assert client.get("/v1/settings").json() == {"startDayOfWeek": "Sunday"}


def test_stats_endpoint(client):
    _create(client, id="h1", name="Read")
    assert client.get("/v1/stats", params={"window": "year"}).status_code == 200
    assert client.get("/v1/stats", params={"window": "decade"}).status_code == 400


def test_stopped_habit_stays_stopped_after_edit(client, api_store):
    _create(client, id="h1", name="Read", startDate="2024-05-01")
    habit = client.post("/v1/habits/h1/stop", json={"date": "2024-05-01"}).json()["habit"]
    assert habit["endDate"] == "2024-04-30"

    client.put("/v1/habits/h1", json={"name": "Read more", "startDate": "2024-05-01"})
    assert client.get("/v1/due", params={"date": "2024-06-01"}).json()["items"] == []
    assert api_store.get_habit("h1").end_date == "2024-04-30"
