from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_positive_id
from ..core.constants import DEFAULT_RECONCILE_WORKERS
from ..core.exceptions import InvalidRangeError, ValidationError
from ..overtime.repository import OvertimeRepository
from ..punches.repository import PunchRepository
from ..schedules.repository import ScheduleRepository
from .engine import pair_for, summarize_subject
from .model import DaySummary, SubjectRangeSummary
from .pairing import DayPairing
from .resolver import DurationResolver
from .snapshot import ReconciliationSnapshot
from .windows import DayWindows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationSettings:
    tz: tzinfo
    workers: int = DEFAULT_RECONCILE_WORKERS
    raw_fallback_for_tracked: bool = True


class ReconciliationService:
    """Use case: turn raw punches into per-day tracked and validated totals."""

    def __init__(
        self,
        punches: PunchRepository,
        schedules: ScheduleRepository,
        grants: OvertimeRepository,
        *,
        settings: ReconciliationSettings,
    ):
        self._punches = punches
        self._schedules = schedules
        self._grants = grants
        self._settings = settings
        self._resolver = DurationResolver(tz=settings.tz, raw_fallback_for_tracked=settings.raw_fallback_for_tracked)

    @property
    def tz(self) -> tzinfo:
        return self._settings.tz

    def today(self) -> date:
        return now_local(self._settings.tz).date()

    @staticmethod
    def _check_request(subject_ids: Sequence[int], start: date, end: date) -> list[int]:
        if not subject_ids:
            raise ValidationError("At least one subject is required")
        if end < start:
            raise InvalidRangeError("End date must not be before start date")
        ids: list[int] = []
        for raw in subject_ids:
            subject_id = require_positive_id(raw, "Subject")
            if subject_id not in ids:
                ids.append(subject_id)
        return ids

    def load_snapshot(
        self,
        subject_ids: Sequence[int],
        start: date,
        end: date,
        *,
        today: Optional[date] = None,
    ) -> ReconciliationSnapshot:
        return ReconciliationSnapshot.build(
            tz=self._settings.tz,
            today=today or self.today(),
            start=start,
            end=end,
            default_schedule=self._schedules.get_default(),
            subject_schedules=self._schedules.list_for_subjects(subject_ids),
            overrides=self._schedules.list_overrides(subject_ids=subject_ids, start=start, end=end),
            grants=self._grants.list_range(start=start, end=end, subject_ids=subject_ids),
            punches=self._punches.list_for_subjects(subject_ids=subject_ids, start=start, end=end),
        )

    def reconcile(
        self,
        subject_ids: Sequence[int],
        start: date,
        end: date,
        *,
        today: Optional[date] = None,
    ) -> list[DaySummary]:
        """Day summaries for every subject and every date in [start, end], subject by subject."""
        ids = self._check_request(subject_ids, start, end)
        snapshot = self.load_snapshot(ids, start, end, today=today)

        workers = max(1, min(int(self._settings.workers), len(ids)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reconcile") as pool:
            per_subject = list(pool.map(lambda sid: summarize_subject(snapshot, sid, self._resolver), ids))

        logger.debug("Reconciled %d subject(s) over %s..%s", len(ids), start, end)
        return [day for days in per_subject for day in days]

    def summarize_range(
        self,
        subject_ids: Sequence[int],
        start: date,
        end: date,
        *,
        today: Optional[date] = None,
    ) -> list[SubjectRangeSummary]:
        days = self.reconcile(subject_ids, start, end, today=today)
        by_subject: dict[int, list[DaySummary]] = {}
        for day in days:
            by_subject.setdefault(day.subject_id, []).append(day)
        return [
            SubjectRangeSummary(subject_id=sid, start=start, end=end, days=tuple(items))
            for sid, items in by_subject.items()
        ]

    def pair_day(
        self,
        subject_id: int,
        work_date: date,
        *,
        today: Optional[date] = None,
    ) -> tuple[DayPairing, DayWindows]:
        """Fresh pairing of one subject's day, read straight from the stores."""
        snapshot = self.load_snapshot([subject_id], work_date, work_date, today=today)
        return pair_for(snapshot, subject_id, work_date)
