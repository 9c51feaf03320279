from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import from_epoch_ms, to_epoch_ms
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OvertimeGrant
from .repository import OvertimeRepository


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_grant(self, r: dict) -> OvertimeGrant:
        return OvertimeGrant(
            subject_id=int(r["subject_id"]),
            work_date=r["work_date"],
            start=from_epoch_ms(int(r["start_ms"]), self._tz),
            end=from_epoch_ms(int(r["end_ms"]), self._tz),
            created_by=str(r["created_by"]),
        )

    def get(self, *, subject_id: int, work_date: date) -> Optional[OvertimeGrant]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, work_date, start_ms, end_ms, created_by
                FROM overtime_grants
                WHERE subject_id=%s AND work_date=%s
                """,
                (int(subject_id), work_date),
            )
            r = fetchone(cur)
            return self._to_grant(r) if r else None

    def list_range(
        self,
        *,
        start: date,
        end: date,
        subject_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[OvertimeGrant]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if subject_ids is not None:
            if not subject_ids:
                return []
            clauses.append(f"subject_id IN ({','.join(['%s'] * len(subject_ids))})")
            params.extend(int(s) for s in subject_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT subject_id, work_date, start_ms, end_ms, created_by
                FROM overtime_grants
                WHERE {' AND '.join(clauses)}
                ORDER BY work_date ASC, subject_id ASC
                """,
                tuple(params),
            )
            return [self._to_grant(r) for r in fetchall(cur)]

    def create(self, grant: OvertimeGrant) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO overtime_grants(subject_id, work_date, start_ms, end_ms, created_by)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        int(grant.subject_id),
                        grant.work_date,
                        to_epoch_ms(grant.start),
                        to_epoch_ms(grant.end),
                        grant.created_by,
                    ),
                )
                return True
        except mysql.connector.IntegrityError:
            return False

    def update_window(self, *, subject_id: int, work_date: date, start: datetime, end: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_grants
                SET start_ms=%s, end_ms=%s
                WHERE subject_id=%s AND work_date=%s
                """,
                (to_epoch_ms(start), to_epoch_ms(end), int(subject_id), work_date),
            )
            return cur.rowcount > 0

    def delete(self, *, subject_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM overtime_grants WHERE subject_id=%s AND work_date=%s",
                (int(subject_id), work_date),
            )
            return cur.rowcount > 0
