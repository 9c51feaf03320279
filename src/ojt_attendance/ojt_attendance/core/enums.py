from __future__ import annotations

from enum import Enum
from typing import Optional


class PunchKind(str, Enum):
    """Direction of a punch captured by the camera kiosk."""

    IN = "in"
    OUT = "out"


class ReviewStatus(str, Enum):
    """Review state of a punch. Pending is the only non-terminal state."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ReviewStatus.PENDING

    @classmethod
    def from_storage(cls, raw: Optional[str], reviewer_id: Optional[str] = None) -> "ReviewStatus":
        """Normalise stored status values, including legacy spellings.

        Older rows were approved by setting a reviewer without touching the
        status column, and statuses were written in mixed case.
        """
        value = (raw or "").strip().lower()
        if value == "rejected":
            return cls.REJECTED
        if value == "approved" or reviewer_id:
            return cls.APPROVED
        return cls.PENDING


class Slot(str, Enum):
    """Session slot of a subject's day, in assignment priority order."""

    AM = "AM"
    PM = "PM"
    OT = "OT"


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> ReviewStatus:
        if self is ReviewDecision.APPROVE:
            return ReviewStatus.APPROVED
        return ReviewStatus.REJECTED


class DurationSource(str, Enum):
    """Which rule produced a session's duration."""

    LEDGER = "ledger"
    SNAPSHOT = "snapshot"
    LIVE = "live"
    RAW_FALLBACK = "raw_fallback"
    REJECTED = "rejected"
    INCOMPLETE = "incomplete"


class SessionFlag(str, Enum):
    LATE = "LATE"
    MISSED_LUNCH_PUNCH = "MISSED_LUNCH_PUNCH"


class ChangeTopic(str, Enum):
    PUNCH = "punch"
    REVIEW = "review"
    SCHEDULE = "schedule"
    OVERRIDE = "override"
    OVERTIME = "overtime"
