from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Optional

from ..common.datetime_utils import from_epoch_ms
from ..common.validators import require_epoch_ms, require_positive_id
from ..core.enums import ChangeTopic, PunchKind
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.channel import ChangeChannel, ChangeNotice
from .model import PunchEvent
from .repository import PunchRepository

logger = logging.getLogger(__name__)


class PunchService:
    """Recording of punches coming from the capture device."""

    def __init__(self, punches: PunchRepository, *, tz: tzinfo, changes: Optional[ChangeChannel] = None):
        self._punches = punches
        self._tz = tz
        self._changes = changes

    @staticmethod
    def _parse_kind(kind: Any) -> PunchKind:
        if isinstance(kind, PunchKind):
            return kind
        try:
            return PunchKind(str(kind or "").strip().lower())
        except ValueError:
            raise ValidationError("Punch kind must be 'in' or 'out'")

    def record_punch(
        self,
        *,
        subject_id: Any,
        kind: Any,
        occurred_at_ms: Any,
        evidence_ref: Optional[str] = None,
    ) -> PunchEvent:
        subject_id = require_positive_id(subject_id, "Subject")
        punch_kind = self._parse_kind(kind)
        occurred_at = from_epoch_ms(require_epoch_ms(occurred_at_ms, "Punch time"), self._tz)
        evidence_ref = (evidence_ref or "").strip() or None

        event_id = self._punches.create(
            subject_id=subject_id,
            kind=punch_kind,
            occurred_at=occurred_at,
            evidence_ref=evidence_ref,
        )
        logger.info("Recorded %s punch %s for subject %s at %s", punch_kind.value, event_id, subject_id, occurred_at)

        if self._changes:
            self._changes.publish(
                ChangeNotice(topic=ChangeTopic.PUNCH, subject_id=subject_id, work_date=occurred_at.date())
            )
        return self.get_punch(event_id)

    def get_punch(self, event_id: Any) -> PunchEvent:
        event_id = require_positive_id(event_id, "Punch")
        event = self._punches.get_by_id(event_id)
        if event is None:
            raise NotFoundError(f"Punch {event_id} does not exist")
        return event
