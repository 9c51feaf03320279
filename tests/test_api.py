from __future__ import annotations

from datetime import date

import pytest

from src.ojt_attendance.ojt_attendance.common.datetime_utils import to_epoch_ms
from src.ojt_attendance.ojt_attendance.container import build_services
from src.ojt_attendance.ojt_attendance.main import create_app

from tests.fakes import TZ, FakeOvertimeRepo, FakePunchRepo, FakeScheduleRepo, at, default_schedule

DAY = date(2020, 6, 1)


@pytest.fixture()
def container():
    return build_services(
        punches_repo=FakePunchRepo(),
        schedules_repo=FakeScheduleRepo(default_schedule()),
        overtime_repo=FakeOvertimeRepo(),
        tz=TZ,
        reconcile_workers=2,
        review_workers=2,
    )


@pytest.fixture()
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


def _punch(client, kind, moment):
    resp = client.post("/api/punches", json={"subject_id": 1, "kind": kind, "occurred_at": to_epoch_ms(moment)})
    assert resp.status_code == 201
    return resp.get_json()["punch"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["timezone"] == "Asia/Manila"


def test_record_and_fetch_punch(client):
    punch = _punch(client, "in", at(DAY, 8, 2))

    resp = client.get(f"/api/punches/{punch['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["punch"]["status"] == "Pending"
    assert client.get("/api/punches/999").status_code == 404


def test_malformed_punch_is_400(client):
    resp = client.post("/api/punches", json={"subject_id": 1, "kind": "in", "occurred_at": "yesterday"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    assert client.post("/api/punches", data="not json", content_type="text/plain").status_code == 400


def test_reconcile_then_approve_virtual_close_out(client):
    _punch(client, "in", at(DAY, 8, 0))
    _punch(client, "out", at(DAY, 12, 0))
    _punch(client, "in", at(DAY, 13, 0))

    resp = client.get(f"/api/reconcile?subject_ids=1&start={DAY}&end={DAY}")
    assert resp.status_code == 200
    [day] = resp.get_json()["days"]
    assert day["tracked_minutes"] == 480
    pm = day["sessions"][1]
    assert pm["out"]["is_virtual"] is True

    ids = [day["sessions"][0]["in"]["id"], day["sessions"][0]["out"]["id"], pm["in"]["id"], pm["out"]["id"]]
    resp = client.post("/api/review", json={"event_ids": ids, "decision": "approve", "reviewer_id": "sup-1"})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert [r["materialized"] for r in body["results"]] == [False, False, False, True]

    resp = client.get(f"/api/reconcile/summary?subject_ids=1&start={DAY}&end={DAY}")
    [summary] = resp.get_json()["subjects"]
    assert summary["validated_minutes"] == 480
    assert summary["validated_hours"] == 8.0


def test_review_reports_per_id_failures(client):
    punch = _punch(client, "in", at(DAY, 8, 0))

    resp = client.post("/api/review", json={"event_ids": [punch["id"], 999], "decision": "reject"})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["success"] is False
    assert [r["ok"] for r in body["results"]] == [True, False]


def test_malformed_id_fails_alone_in_a_batch(client):
    punch = _punch(client, "in", at(DAY, 8, 0))

    resp = client.post(
        "/api/review",
        json={"event_ids": [punch["id"], "-5", "virtual:nope"], "decision": "approve", "reviewer_id": "sup-1"},
    )
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["success"] is False
    assert [(r["id"], r["ok"]) for r in body["results"]] == [(str(punch["id"]), True), ("-5", False), ("virtual:nope", False)]
    assert all(r["error"] for r in body["results"][1:])
    assert client.get(f"/api/punches/{punch['id']}").get_json()["punch"]["status"] == "Approved"


@pytest.mark.parametrize(
    "payload",
    [
        {"event_ids": [1], "decision": "maybe", "reviewer_id": "x"},
        {"event_ids": [], "decision": "approve", "reviewer_id": "x"},
        {"event_ids": [1], "decision": "approve"},
    ],
)
def test_bad_review_requests_are_400(client, payload):
    assert client.post("/api/review", json=payload).status_code == 400


def test_reconcile_validates_query(client):
    assert client.get("/api/reconcile").status_code == 400
    assert client.get("/api/reconcile?subject_ids=1&start=2020-06-02&end=2020-06-01").status_code == 400
    assert client.get("/api/reconcile?subject_ids=1&start=June").status_code == 400


def test_schedule_and_override_endpoints(client, container):
    resp = client.put("/api/schedules", json={"morning": {"start": "09:00", "end": "12:00"}})
    assert resp.status_code == 200
    assert container.schedules_repo.get_default().afternoon is None

    resp = client.post(
        "/api/overrides",
        json={"subject_id": 1, "date": "2020-06-01", "morning": {"start": "10:00", "end": "11:00"}},
    )
    assert resp.status_code == 200
    assert resp.get_json()["override"]["morning"] == {"start": "10:00", "end": "11:00"}

    assert client.delete("/api/overrides?subject_id=1&date=2020-06-01").status_code == 200
    assert client.delete("/api/overrides?subject_id=1&date=2020-06-01").status_code == 404
    assert client.put("/api/schedules", json={"morning": {"start": "09:00"}}).status_code == 400


def test_overtime_endpoints(client):
    grant = {
        "subject_id": 1,
        "date": "2020-06-01",
        "start": to_epoch_ms(at(DAY, 18)),
        "end": to_epoch_ms(at(DAY, 20)),
        "created_by": "sup-1",
    }
    assert client.post("/api/overtime", json=grant).status_code == 201
    assert client.post("/api/overtime", json=grant).status_code == 400

    reversed_range = dict(grant, start=grant["end"], end=grant["start"])
    assert client.put("/api/overtime", json=reversed_range).status_code == 400

    revised = dict(grant, end=to_epoch_ms(at(DAY, 21)))
    resp = client.put("/api/overtime", json=revised)
    assert resp.status_code == 200
    assert resp.get_json()["grant"]["end"] == revised["end"]

    resp = client.get("/api/overtime?start=2020-06-01&end=2020-06-01")
    assert [g["subject_id"] for g in resp.get_json()["grants"]] == [1]

    assert client.delete("/api/overtime?subject_id=1&date=2020-06-01").status_code == 200
    assert client.delete("/api/overtime?subject_id=1&date=2020-06-01").status_code == 404
