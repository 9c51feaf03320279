from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from src.ojt_attendance.ojt_attendance.core.enums import PunchKind, ReviewStatus
from src.ojt_attendance.ojt_attendance.overtime.model import OvertimeGrant
from src.ojt_attendance.ojt_attendance.punches.model import PersistedRef, PunchEvent
from src.ojt_attendance.ojt_attendance.schedules.model import DateOverride, ShiftSchedule, TimeWindow

TZ = ZoneInfo("Asia/Manila")


def at(d: date, hh: int, mm: int = 0, ss: int = 0) -> datetime:
    return datetime(d.year, d.month, d.day, hh, mm, ss, tzinfo=TZ)


def window(start: str, end: str) -> TimeWindow:
    sh, sm = (int(p) for p in start.split(":"))
    eh, em = (int(p) for p in end.split(":"))
    return TimeWindow(start=time(sh, sm), end=time(eh, em))


def default_schedule() -> ShiftSchedule:
    return ShiftSchedule(subject_id=None, morning=window("08:00", "12:00"), afternoon=window("13:00", "17:00"))


class FakePunchRepo:
    """In-memory punch store with the same conditional-update rules as the MySQL one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self._rows: dict[int, PunchEvent] = {}
        self.review_writes = 0
        self.freeze_writes = 0

    def add(self, *, subject_id, kind, occurred_at, status=ReviewStatus.PENDING, **extra) -> int:
        event_id = self.create(subject_id=subject_id, kind=kind, occurred_at=occurred_at)
        with self._lock:
            self._rows[event_id] = replace(self._rows[event_id], status=status, **extra)
        return event_id

    def create(self, *, subject_id, kind, occurred_at, evidence_ref=None, is_synthetic=False) -> int:
        with self._lock:
            event_id = self._next_id
            self._next_id += 1
            self._rows[event_id] = PunchEvent(
                ref=PersistedRef(event_id),
                subject_id=subject_id,
                kind=PunchKind(kind),
                occurred_at=occurred_at.astimezone(TZ),
                evidence_ref=evidence_ref,
                is_synthetic=is_synthetic,
            )
            return event_id

    def get_by_id(self, event_id) -> Optional[PunchEvent]:
        with self._lock:
            return self._rows.get(int(event_id))

    def list_for_subjects(self, *, subject_ids, start, end):
        with self._lock:
            rows = list(self._rows.values())
        return [
            e
            for e in rows
            if e.subject_id in subject_ids and start <= e.occurred_at.astimezone(TZ).date() <= end
        ]

    def record_review(self, *, event_id, status, reviewer_id, reviewed_at) -> bool:
        with self._lock:
            current = self._rows.get(event_id)
            if current is None or current.status is not ReviewStatus.PENDING or current.reviewer_id:
                return False
            self._rows[event_id] = replace(current, status=status, reviewer_id=reviewer_id, reviewed_at=reviewed_at)
            self.review_writes += 1
            return True

    def capture_window_snapshot(self, *, event_id, snapshot) -> bool:
        with self._lock:
            current = self._rows.get(event_id)
            if current is None or current.window_snapshot is not None:
                return False
            self._rows[event_id] = replace(current, window_snapshot=snapshot)
            return True

    def freeze_validated_minutes(self, *, event_id, minutes) -> bool:
        with self._lock:
            current = self._rows.get(event_id)
            if current is None or current.validated_minutes is not None:
                return False
            self._rows[event_id] = replace(current, validated_minutes=minutes)
            self.freeze_writes += 1
            return True

    def all(self) -> list[PunchEvent]:
        with self._lock:
            return sorted(self._rows.values(), key=lambda e: e.event_id)


class FakeScheduleRepo:
    def __init__(self, default: Optional[ShiftSchedule] = None):
        self._schedules: dict[Optional[int], ShiftSchedule] = {}
        self._overrides: dict[tuple[Optional[int], date], DateOverride] = {}
        if default is not None:
            self.save(default)

    def get_default(self):
        return self._schedules.get(None)

    def get_for_subject(self, subject_id):
        return self._schedules.get(subject_id)

    def list_for_subjects(self, subject_ids):
        return [s for k, s in self._schedules.items() if k is not None and k in subject_ids]

    def save(self, schedule):
        self._schedules[schedule.subject_id] = schedule

    def list_overrides(self, *, subject_ids, start, end):
        return [
            o
            for (scope, d), o in self._overrides.items()
            if start <= d <= end and (scope is None or scope in subject_ids)
        ]

    def replace_override(self, override):
        self._overrides[(override.subject_id, override.work_date)] = override

    def delete_override(self, *, subject_id, work_date) -> bool:
        return self._overrides.pop((subject_id, work_date), None) is not None


class FakeOvertimeRepo:
    def __init__(self):
        self._grants: dict[tuple[int, date], OvertimeGrant] = {}

    def get(self, *, subject_id, work_date):
        return self._grants.get((subject_id, work_date))

    def list_range(self, *, start, end, subject_ids=None):
        return [
            g
            for (sid, d), g in sorted(self._grants.items())
            if start <= d <= end and (subject_ids is None or sid in subject_ids)
        ]

    def create(self, grant) -> bool:
        key = (grant.subject_id, grant.work_date)
        if key in self._grants:
            return False
        self._grants[key] = grant
        return True

    def update_window(self, *, subject_id, work_date, start, end) -> bool:
        key = (subject_id, work_date)
        if key not in self._grants:
            return False
        self._grants[key] = replace(self._grants[key], start=start, end=end)
        return True

    def delete(self, *, subject_id, work_date) -> bool:
        return self._grants.pop((subject_id, work_date), None) is not None


def make_punch(event_id: int, kind: str, occurred_at: datetime, *, subject_id: int = 1, **extra) -> PunchEvent:
    return PunchEvent(
        ref=PersistedRef(event_id),
        subject_id=subject_id,
        kind=PunchKind(kind),
        occurred_at=occurred_at,
        **extra,
    )
