from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import DateOverride, ShiftSchedule, TimeWindow
from .repository import ScheduleRepository

GLOBAL_SCOPE = 0


def _scope_key(subject_id: Optional[int]) -> int:
    return GLOBAL_SCOPE if subject_id is None else int(subject_id)


def _subject_of(scope_key: Any) -> Optional[int]:
    key = int(scope_key)
    return None if key == GLOBAL_SCOPE else key


def _window(r: dict, prefix: str) -> Optional[TimeWindow]:
    start = normalize_mysql_time(r.get(f"{prefix}_start"))
    end = normalize_mysql_time(r.get(f"{prefix}_end"))
    if start is None or end is None:
        return None
    return TimeWindow(start=start, end=end)


def _bounds(window: Optional[TimeWindow]) -> tuple:
    if window is None:
        return None, None
    return window.start, window.end


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_schedule(r: dict) -> ShiftSchedule:
        return ShiftSchedule(
            subject_id=_subject_of(r["scope_key"]),
            morning=_window(r, "morning"),
            afternoon=_window(r, "afternoon"),
            overtime=_window(r, "overtime"),
        )

    def _get(self, scope_key: int) -> Optional[ShiftSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT scope_key, morning_start, morning_end, afternoon_start, afternoon_end,
                       overtime_start, overtime_end
                FROM shift_schedules
                WHERE scope_key=%s
                """,
                (scope_key,),
            )
            r = fetchone(cur)
            return self._to_schedule(r) if r else None

    def get_default(self) -> Optional[ShiftSchedule]:
        return self._get(GLOBAL_SCOPE)

    def get_for_subject(self, subject_id: int) -> Optional[ShiftSchedule]:
        return self._get(int(subject_id))

    def list_for_subjects(self, subject_ids: Sequence[int]) -> Sequence[ShiftSchedule]:
        if not subject_ids:
            return []
        placeholders = ",".join(["%s"] * len(subject_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT scope_key, morning_start, morning_end, afternoon_start, afternoon_end,
                       overtime_start, overtime_end
                FROM shift_schedules
                WHERE scope_key IN ({placeholders})
                """,
                tuple(int(s) for s in subject_ids),
            )
            return [self._to_schedule(r) for r in fetchall(cur)]

    def save(self, schedule: ShiftSchedule) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_schedules(
                    scope_key, morning_start, morning_end, afternoon_start, afternoon_end,
                    overtime_start, overtime_end
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    morning_start=VALUES(morning_start), morning_end=VALUES(morning_end),
                    afternoon_start=VALUES(afternoon_start), afternoon_end=VALUES(afternoon_end),
                    overtime_start=VALUES(overtime_start), overtime_end=VALUES(overtime_end)
                """,
                (
                    _scope_key(schedule.subject_id),
                    *_bounds(schedule.morning),
                    *_bounds(schedule.afternoon),
                    *_bounds(schedule.overtime),
                ),
            )

    def list_overrides(self, *, subject_ids: Sequence[int], start: date, end: date) -> Sequence[DateOverride]:
        scopes = [GLOBAL_SCOPE, *[int(s) for s in subject_ids]]
        placeholders = ",".join(["%s"] * len(scopes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT scope_key, work_date, morning_start, morning_end, afternoon_start, afternoon_end
                FROM date_overrides
                WHERE scope_key IN ({placeholders}) AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, scope_key ASC
                """,
                (*scopes, start, end),
            )
            return [
                DateOverride(
                    work_date=r["work_date"],
                    subject_id=_subject_of(r["scope_key"]),
                    morning=_window(r, "morning"),
                    afternoon=_window(r, "afternoon"),
                )
                for r in fetchall(cur)
            ]

    def replace_override(self, override: DateOverride) -> None:
        scope_key = _scope_key(override.subject_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM date_overrides WHERE scope_key=%s AND work_date=%s",
                (scope_key, override.work_date),
            )
            cur.execute(
                """
                INSERT INTO date_overrides(
                    scope_key, work_date, morning_start, morning_end, afternoon_start, afternoon_end
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (scope_key, override.work_date, *_bounds(override.morning), *_bounds(override.afternoon)),
            )

    def delete_override(self, *, subject_id: Optional[int], work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM date_overrides WHERE scope_key=%s AND work_date=%s",
                (_scope_key(subject_id), work_date),
            )
            return cur.rowcount > 0
