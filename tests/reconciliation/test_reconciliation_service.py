from __future__ import annotations

from datetime import date

import pytest

from src.ojt_attendance.ojt_attendance.core.enums import DurationSource, ReviewStatus, Slot
from src.ojt_attendance.ojt_attendance.core.exceptions import InvalidRangeError, ValidationError
from src.ojt_attendance.ojt_attendance.reconciliation.service import ReconciliationService, ReconciliationSettings

from tests.fakes import TZ, FakeOvertimeRepo, FakePunchRepo, FakeScheduleRepo, at, default_schedule

TODAY = date(2025, 3, 10)
YESTERDAY = date(2025, 3, 9)


def _service(punches, schedules=None, **settings):
    return ReconciliationService(
        punches,
        schedules or FakeScheduleRepo(default_schedule()),
        FakeOvertimeRepo(),
        settings=ReconciliationSettings(tz=TZ, **settings),
    )


def _full_day(repo, subject_id, day, status=ReviewStatus.PENDING):
    repo.add(subject_id=subject_id, kind="in", occurred_at=at(day, 7, 58), status=status)
    repo.add(subject_id=subject_id, kind="out", occurred_at=at(day, 12, 3), status=status)
    repo.add(subject_id=subject_id, kind="in", occurred_at=at(day, 12, 55), status=status)
    repo.add(subject_id=subject_id, kind="out", occurred_at=at(day, 17, 10), status=status)


def test_reconcile_returns_one_summary_per_subject_and_date():
    repo = FakePunchRepo()
    _full_day(repo, 1, YESTERDAY, ReviewStatus.APPROVED)
    _full_day(repo, 2, TODAY)

    days = _service(repo, workers=2).reconcile([1, 2], YESTERDAY, TODAY, today=TODAY)

    assert [(d.subject_id, d.work_date) for d in days] == [
        (1, YESTERDAY),
        (1, TODAY),
        (2, YESTERDAY),
        (2, TODAY),
    ]
    assert (days[0].tracked_minutes, days[0].validated_minutes) == (480, 480)
    assert days[1].tracked_minutes == 0
    assert (days[3].tracked_minutes, days[3].validated_minutes) == (480, 0)


def test_unclosed_past_session_is_tracked_through_virtual_close_out():
    repo = FakePunchRepo()
    repo.add(subject_id=1, kind="in", occurred_at=at(YESTERDAY, 8, 0))

    [day] = _service(repo).reconcile([1], YESTERDAY, YESTERDAY, today=TODAY)

    am = day.session(Slot.AM)
    assert am.out_event.is_virtual
    assert am.tracked_minutes == 240
    assert day.validated_minutes == 0


def test_late_slots_are_reported():
    repo = FakePunchRepo()
    repo.add(subject_id=1, kind="in", occurred_at=at(TODAY, 8, 20))
    repo.add(subject_id=1, kind="out", occurred_at=at(TODAY, 12, 0))

    [day] = _service(repo).reconcile([1], TODAY, TODAY, today=TODAY)

    assert day.late_slots == (Slot.AM,)
    assert day.tracked_minutes == 220


def test_no_schedule_shows_raw_elapsed_as_tracked():
    repo = FakePunchRepo()
    repo.add(subject_id=1, kind="in", occurred_at=at(TODAY, 9, 0), status=ReviewStatus.APPROVED)
    repo.add(subject_id=1, kind="out", occurred_at=at(TODAY, 10, 30), status=ReviewStatus.APPROVED)

    [day] = _service(repo, schedules=FakeScheduleRepo()).reconcile([1], TODAY, TODAY, today=TODAY)

    assert day.tracked_minutes == 90
    assert day.validated_minutes == 0
    assert day.session(Slot.AM).source is DurationSource.RAW_FALLBACK


def test_summarize_range_totals_each_subject():
    repo = FakePunchRepo()
    _full_day(repo, 1, YESTERDAY, ReviewStatus.APPROVED)
    _full_day(repo, 1, TODAY, ReviewStatus.APPROVED)

    [summary] = _service(repo).summarize_range([1], YESTERDAY, TODAY, today=TODAY)

    assert summary.validated_minutes == 960
    assert summary.to_dict()["validated_hours"] == 16.0


def test_day_summary_serializes_epoch_millis_and_hours():
    repo = FakePunchRepo()
    _full_day(repo, 1, TODAY)

    [day] = _service(repo).reconcile([1], TODAY, TODAY, today=TODAY)
    data = day.to_dict()

    assert data["date"] == "2025-03-10"
    assert data["tracked_hours"] == 8.0
    assert data["tracked_display"] == "8:00"
    assert isinstance(data["sessions"][0]["in"]["occurred_at"], int)


def test_invalid_requests_are_rejected():
    service = _service(FakePunchRepo())

    with pytest.raises(ValidationError):
        service.reconcile([], TODAY, TODAY)
    with pytest.raises(InvalidRangeError):
        service.reconcile([1], TODAY, YESTERDAY)
    with pytest.raises(ValidationError):
        service.reconcile([0], TODAY, TODAY)
