from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchKind, ReviewStatus
from .model import PunchEvent, WindowSnapshot


class PunchRepository(Protocol):
    def create(
        self,
        *,
        subject_id: int,
        kind: PunchKind,
        occurred_at: datetime,
        evidence_ref: Optional[str] = None,
        is_synthetic: bool = False,
    ) -> int:
        """Persist a Pending punch and return its event id."""

        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[PunchEvent]:
        raise NotImplementedError

    def list_for_subjects(self, *, subject_ids: Sequence[int], start: date, end: date) -> Sequence[PunchEvent]:
        """All punches of the subjects whose local date falls in [start, end]."""

        raise NotImplementedError

    def record_review(
        self,
        *,
        event_id: int,
        status: ReviewStatus,
        reviewer_id: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        """Move a Pending punch to a terminal status.

        Returns False when the punch was no longer Pending.
        """

        raise NotImplementedError

    def capture_window_snapshot(self, *, event_id: int, snapshot: WindowSnapshot) -> bool:
        """Store the official window unless one was captured already."""

        raise NotImplementedError

    def freeze_validated_minutes(self, *, event_id: int, minutes: int) -> bool:
        """Store the ledger duration unless one was frozen already."""

        raise NotImplementedError
