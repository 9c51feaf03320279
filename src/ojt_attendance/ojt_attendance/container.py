from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .common.datetime_utils import get_zone
from .core.constants import DEFAULT_RECONCILE_WORKERS, DEFAULT_REVIEW_WORKERS, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .notifications.channel import ChangeChannel
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeService
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository
from .punches.service import PunchService
from .reconciliation.service import ReconciliationService, ReconciliationSettings
from .review.service import ReviewService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService


@dataclass(frozen=True)
class Container:
    tz: tzinfo
    changes: ChangeChannel

    punches_repo: PunchRepository
    schedules_repo: ScheduleRepository
    overtime_repo: OvertimeRepository

    punch_service: PunchService
    reconciliation_service: ReconciliationService
    review_service: ReviewService
    schedule_service: ScheduleService
    overtime_service: OvertimeService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    punches_repo: PunchRepository,
    schedules_repo: ScheduleRepository,
    overtime_repo: OvertimeRepository,
    tz: tzinfo,
    reconcile_workers: int = DEFAULT_RECONCILE_WORKERS,
    review_workers: int = DEFAULT_REVIEW_WORKERS,
    raw_fallback_for_tracked: bool = True,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire the use cases over any set of repositories."""
    changes = ChangeChannel()
    reconciliation_service = ReconciliationService(
        punches_repo,
        schedules_repo,
        overtime_repo,
        settings=ReconciliationSettings(
            tz=tz,
            workers=reconcile_workers,
            raw_fallback_for_tracked=raw_fallback_for_tracked,
        ),
    )

    return Container(
        tz=tz,
        changes=changes,
        punches_repo=punches_repo,
        schedules_repo=schedules_repo,
        overtime_repo=overtime_repo,
        punch_service=PunchService(punches_repo, tz=tz, changes=changes),
        reconciliation_service=reconciliation_service,
        review_service=ReviewService(punches_repo, reconciliation_service, workers=review_workers, changes=changes),
        schedule_service=ScheduleService(schedules_repo, changes=changes),
        overtime_service=OvertimeService(overtime_repo, changes=changes),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    reconcile_workers: int = DEFAULT_RECONCILE_WORKERS,
    review_workers: int = DEFAULT_REVIEW_WORKERS,
    raw_fallback_for_tracked: bool = True,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    tz = get_zone(timezone)

    return build_services(
        punches_repo=MySQLPunchRepository(conn, tz=tz),
        schedules_repo=MySQLScheduleRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn, tz=tz),
        tz=tz,
        reconcile_workers=reconcile_workers,
        review_workers=review_workers,
        raw_fallback_for_tracked=raw_fallback_for_tracked,
        conn=conn,
    )
