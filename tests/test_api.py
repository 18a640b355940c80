"""Tests for ui/app.py — JSON API over the workspace."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from ui.app import app


@pytest.fixture
def client(workspace):
    return TestClient(app)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()  # workspace runs on UTC


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_summary_empty_workspace(client):
    data = client.get("/api/summary").json()
    assert data["count"] == 0
    assert data["streak"] == 0
    assert data["total"] == 0
    assert data["goal"] == 100


def test_add_reps_and_goal_reached(client):
    day = "2024-01-02"
    r = client.post("/api/reps/add", json={"date": day, "amount": 60})
    assert r.status_code == 200
    assert r.json()["goalReached"] is False

    r = client.post("/api/reps/add", json={"date": day, "amount": 40})
    assert r.json()["goalReached"] is True
    assert r.json()["summary"]["count"] == 100

    assert client.get("/api/summary", params={"date": day}).json()["count"] == 100


def test_add_reps_rejects_bad_amount(client):
    assert client.post("/api/reps/add", json={"amount": -5}).status_code == 400
    assert client.post("/api/reps/add", json={"amount": "ten"}).status_code == 400


def test_custom_add_ignores_invalid(client):
    r = client.post("/api/reps/custom", json={"date": "2024-01-02", "amount": "abc"})
    assert r.status_code == 200
    assert r.json()["applied"] is False
    assert r.json()["summary"]["count"] == 0


def test_undo_and_set(client):
    client.put("/api/reps/2024-01-02", json={"count": 15})
    r = client.post("/api/reps/undo", json={"date": "2024-01-02"})
    assert r.json()["summary"]["count"] == 5
    r = client.post("/api/reps/undo", json={"date": "2024-01-02"})
    assert r.json()["summary"]["count"] == 0


def test_invalid_date_is_400(client):
    assert client.get("/api/summary", params={"date": "someday"}).status_code == 400


def test_calendar(client):
    client.put("/api/reps/2024-02-10", json={"count": 100})
    data = client.get("/api/calendar", params={"year": 2024, "month": 2, "selected": "2024-02-10"}).json()
    assert data["label"] == "February 2024"
    days = [c for c in data["cells"] if c["day"] is not None]
    assert len(days) == 29
    assert len(data["cells"]) == 33
    cell = next(c for c in days if c["date"] == "2024-02-10")
    assert cell["status"] == "done"
    assert cell["isSelected"] is True


def test_calendar_needs_year_and_month(client):
    assert client.get("/api/calendar", params={"year": 2024}).status_code == 400


def test_fast_start_and_end(client):
    assert client.get("/api/fast").json()["fasting"] is False

    started = (datetime.now().astimezone() - timedelta(hours=2)).isoformat()
    r = client.post("/api/fast/start", json={"start_time": started})
    assert r.status_code == 200
    assert r.json()["fast"]["fasting"] is True

    assert client.post("/api/fast/start", json={}).status_code == 409

    r = client.post("/api/fast/end")
    record = r.json()["record"]
    assert record["duration"] >= 2 * 3_600_000
    assert r.json()["fast"]["fasting"] is False
    assert len(r.json()["fast"]["history"]) == 1

    stats = client.get("/api/fast/stats").json()
    assert stats["total_fasts"] == 1


def test_fast_start_future_rejected(client):
    future = (datetime.now().astimezone() + timedelta(hours=1)).isoformat()
    r = client.post("/api/fast/start", json={"start_time": future})
    assert r.status_code == 400
    assert "future" in r.json()["detail"]
    assert client.get("/api/fast").json()["fasting"] is False


def test_fast_end_when_idle(client):
    r = client.post("/api/fast/end")
    assert r.status_code == 200
    assert r.json()["record"] is None


def test_index_renders(client):
    client.post("/api/reps/add", json={"date": _today(), "amount": 30})
    r = client.get("/")
    assert r.status_code == 200
    assert "70 more to go" in r.text


def test_basic_auth(client, monkeypatch):
    monkeypatch.setenv("REPRING_USERNAME", "me")
    monkeypatch.setenv("REPRING_PASSWORD", "secret")
    assert client.get("/api/summary").status_code == 401
    assert client.get("/api/summary", auth=("me", "wrong")).status_code == 401
    assert client.get("/api/summary", auth=("me", "secret")).status_code == 200


def test_add_reps_rejects_overflowing_amount(client):
    client.post("/api/reps/add", json={"date": "2024-01-02", "amount": 50})
    r = client.post(
        "/api/reps/add",
        content='{"date": "2024-01-02", "amount": 1e400}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert client.get("/api/summary", params={"date": "2024-01-02"}).json()["count"] == 50


def test_set_reps_keeps_large_counts_exact(client):
    r = client.put("/api/reps/2024-01-02", json={"count": 10**17 + 1})
    assert r.json()["summary"]["count"] == 10**17 + 1
