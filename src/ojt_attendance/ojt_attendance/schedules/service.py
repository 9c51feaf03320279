from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..core.enums import ChangeTopic
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.channel import ChangeChannel, ChangeNotice
from .model import DateOverride, ShiftSchedule, TimeWindow
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Schedule and per-date override writes."""

    def __init__(self, schedules: ScheduleRepository, *, changes: Optional[ChangeChannel] = None):
        self._schedules = schedules
        self._changes = changes

    def _notify(self, topic: ChangeTopic, subject_id: Optional[int], work_date: Optional[date] = None) -> None:
        if self._changes:
            self._changes.publish(ChangeNotice(topic=topic, subject_id=subject_id, work_date=work_date))

    @staticmethod
    def _check_scope(subject_id: Optional[int]) -> Optional[int]:
        if subject_id is None:
            return None
        if int(subject_id) <= 0:
            raise ValidationError("Subject is invalid")
        return int(subject_id)

    def set_schedule(
        self,
        *,
        subject_id: Optional[int],
        morning: Optional[TimeWindow] = None,
        afternoon: Optional[TimeWindow] = None,
        overtime: Optional[TimeWindow] = None,
    ) -> ShiftSchedule:
        schedule = ShiftSchedule(
            subject_id=self._check_scope(subject_id),
            morning=morning,
            afternoon=afternoon,
            overtime=overtime,
        )
        self._schedules.save(schedule)
        logger.info("Schedule saved for scope=%s", schedule.subject_id or "default")
        self._notify(ChangeTopic.SCHEDULE, schedule.subject_id)
        return schedule

    def set_override(
        self,
        *,
        subject_id: Optional[int],
        work_date: date,
        morning: Optional[TimeWindow] = None,
        afternoon: Optional[TimeWindow] = None,
    ) -> Optional[DateOverride]:
        """Replace the override for one scope and date.

        Passing neither window removes the override, like clearing both
        fields on the override form.
        """
        scope = self._check_scope(subject_id)
        if morning is None and afternoon is None:
            self._schedules.delete_override(subject_id=scope, work_date=work_date)
            logger.info("Override cleared for scope=%s date=%s", scope or "global", work_date)
            self._notify(ChangeTopic.OVERRIDE, scope, work_date)
            return None

        override = DateOverride(work_date=work_date, subject_id=scope, morning=morning, afternoon=afternoon)
        self._schedules.replace_override(override)
        logger.info("Override set for scope=%s date=%s", scope or "global", work_date)
        self._notify(ChangeTopic.OVERRIDE, scope, work_date)
        return override

    def delete_override(self, *, subject_id: Optional[int], work_date: date) -> None:
        scope = self._check_scope(subject_id)
        if not self._schedules.delete_override(subject_id=scope, work_date=work_date):
            raise NotFoundError(f"No override for {work_date} in scope {scope or 'global'}")
        logger.info("Override deleted for scope=%s date=%s", scope or "global", work_date)
        self._notify(ChangeTopic.OVERRIDE, scope, work_date)
