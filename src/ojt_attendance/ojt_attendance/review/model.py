from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ReviewStatus
from ..punches.model import EventRef


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of one id in a review request; failures are reported, not raised."""

    ref: EventRef
    ok: bool
    event_id: Optional[int] = None
    status: Optional[ReviewStatus] = None
    changed: bool = False
    materialized: bool = False
    frozen_minutes: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.ref.token(),
            "ok": self.ok,
            "event_id": self.event_id,
            "status": self.status.value if self.status else None,
            "changed": self.changed,
            "materialized": self.materialized,
            "frozen_minutes": self.frozen_minutes,
            "error": self.error,
        }
