from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import ChangeTopic
from ..core.exceptions import InvalidRangeError, NotFoundError, ValidationError
from ..notifications.channel import ChangeChannel, ChangeNotice
from .model import OvertimeGrant
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)


class OvertimeService:
    """Grants, revisions and revocations of overtime windows.

    A grant is the only thing that opens the overtime slot for a date.
    Revoking one leaves approved overtime untouched: those durations are
    frozen on the punches, not read from the grant.
    """

    def __init__(self, grants: OvertimeRepository, *, changes: Optional[ChangeChannel] = None):
        self._grants = grants
        self._changes = changes

    @staticmethod
    def _check_range(start: datetime, end: datetime) -> None:
        if start >= end:
            raise InvalidRangeError("Overtime start must be before its end")

    def _notify(self, subject_id: int, work_date: date) -> None:
        if self._changes:
            self._changes.publish(ChangeNotice(topic=ChangeTopic.OVERTIME, subject_id=subject_id, work_date=work_date))

    def grant(
        self,
        *,
        subject_id: int,
        work_date: date,
        start: datetime,
        end: datetime,
        created_by: str,
    ) -> OvertimeGrant:
        subject_id = require_positive_id(subject_id, "Subject")
        created_by = require_non_empty(created_by, "Granted by")
        self._check_range(start, end)

        grant = OvertimeGrant(subject_id=subject_id, work_date=work_date, start=start, end=end, created_by=created_by)
        if not self._grants.create(grant):
            raise ValidationError(f"Overtime already granted for subject {subject_id} on {work_date}")

        logger.info("Overtime granted subject=%s date=%s %s-%s by %s", subject_id, work_date, start, end, created_by)
        self._notify(subject_id, work_date)
        return grant

    def revise(self, *, subject_id: int, work_date: date, start: datetime, end: datetime) -> OvertimeGrant:
        subject_id = require_positive_id(subject_id, "Subject")
        self._check_range(start, end)

        existing = self._grants.get(subject_id=subject_id, work_date=work_date)
        if existing is None:
            raise NotFoundError(f"No overtime grant for subject {subject_id} on {work_date}")

        # Rowcount is 0 when the window is unchanged, so existence is checked above.
        self._grants.update_window(subject_id=subject_id, work_date=work_date, start=start, end=end)
        grant = replace(existing, start=start, end=end)

        logger.info("Overtime revised subject=%s date=%s %s-%s", subject_id, work_date, start, end)
        self._notify(subject_id, work_date)
        return grant

    def revoke(self, *, subject_id: int, work_date: date) -> None:
        subject_id = require_positive_id(subject_id, "Subject")
        if not self._grants.delete(subject_id=subject_id, work_date=work_date):
            raise NotFoundError(f"No overtime grant for subject {subject_id} on {work_date}")

        logger.info("Overtime revoked subject=%s date=%s", subject_id, work_date)
        self._notify(subject_id, work_date)

    def list_grants(
        self,
        *,
        start: date,
        end: date,
        subject_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[OvertimeGrant]:
        if end < start:
            raise InvalidRangeError("End date must not be before start date")
        return self._grants.list_range(start=start, end=end, subject_ids=subject_ids)
