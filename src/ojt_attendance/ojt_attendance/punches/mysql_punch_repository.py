from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional, Sequence

from ..common.datetime_utils import at_time, from_epoch_ms, parse_time_of_day, to_epoch_ms
from ..core.enums import PunchKind, ReviewStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PersistedRef, PunchEvent, WindowSnapshot
from .repository import PunchRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    event_id, subject_id, kind, occurred_at, evidence_ref, status, reviewer_id,
    reviewed_at, validated_minutes, official_start, official_end, is_synthetic
"""


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_event(self, r: dict[str, Any]) -> PunchEvent:
        snapshot = None
        if r.get("official_start") is not None and r.get("official_end") is not None:
            snapshot = WindowSnapshot(
                start=parse_time_of_day(str(r["official_start"])),
                end=parse_time_of_day(str(r["official_end"])),
            )
        reviewer_id = r.get("reviewer_id")
        reviewed_at = r.get("reviewed_at")
        validated = r.get("validated_minutes")
        return PunchEvent(
            ref=PersistedRef(int(r["event_id"])),
            subject_id=int(r["subject_id"]),
            kind=PunchKind(str(r["kind"]).strip().lower()),
            occurred_at=from_epoch_ms(int(r["occurred_at"]), self._tz),
            status=ReviewStatus.from_storage(r.get("status"), reviewer_id),
            evidence_ref=r.get("evidence_ref"),
            reviewer_id=str(reviewer_id) if reviewer_id else None,
            reviewed_at=from_epoch_ms(int(reviewed_at), self._tz) if reviewed_at is not None else None,
            validated_minutes=int(validated) if validated is not None else None,
            window_snapshot=snapshot,
            is_synthetic=bool(r.get("is_synthetic")),
        )

    def create(
        self,
        *,
        subject_id: int,
        kind: PunchKind,
        occurred_at: datetime,
        evidence_ref: Optional[str] = None,
        is_synthetic: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO punch_events(subject_id, kind, occurred_at, evidence_ref, status, is_synthetic)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(subject_id),
                    kind.value,
                    to_epoch_ms(occurred_at),
                    evidence_ref,
                    ReviewStatus.PENDING.value,
                    1 if is_synthetic else 0,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, event_id: int) -> Optional[PunchEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM punch_events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            if not r:
                return None
            return self._to_event(r)

    def list_for_subjects(self, *, subject_ids: Sequence[int], start: date, end: date) -> Sequence[PunchEvent]:
        if not subject_ids:
            return []

        start_ms = to_epoch_ms(at_time(start, time(0, 0), self._tz))
        end_ms = to_epoch_ms(at_time(end + timedelta(days=1), time(0, 0), self._tz))
        placeholders = ",".join(["%s"] * len(subject_ids))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_events
                WHERE subject_id IN ({placeholders})
                  AND occurred_at IS NOT NULL
                  AND occurred_at >= %s AND occurred_at < %s
                ORDER BY subject_id ASC, occurred_at ASC, event_id ASC
                """,
                (*[int(s) for s in subject_ids], start_ms, end_ms),
            )
            rows = fetchall(cur)

        out: list[PunchEvent] = []
        for r in rows:
            try:
                out.append(self._to_event(r))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed punch row event_id=%s: %s", r.get("event_id"), e)
        return out

    def record_review(
        self,
        *,
        event_id: int,
        status: ReviewStatus,
        reviewer_id: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_events
                SET status=%s, reviewer_id=%s, reviewed_at=%s
                WHERE event_id=%s AND status=%s AND reviewer_id IS NULL
                """,
                (
                    status.value,
                    reviewer_id,
                    to_epoch_ms(reviewed_at),
                    int(event_id),
                    ReviewStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def capture_window_snapshot(self, *, event_id: int, snapshot: WindowSnapshot) -> bool:
        start_s, end_s = snapshot.as_strings()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_events
                SET official_start=%s, official_end=%s
                WHERE event_id=%s AND official_start IS NULL
                """,
                (start_s, end_s, int(event_id)),
            )
            return cur.rowcount > 0

    def freeze_validated_minutes(self, *, event_id: int, minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE punch_events
                SET validated_minutes=%s
                WHERE event_id=%s AND validated_minutes IS NULL
                """,
                (int(minutes), int(event_id)),
            )
            return cur.rowcount > 0
