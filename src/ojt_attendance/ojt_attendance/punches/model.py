from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Optional, Union

from ..common.datetime_utils import format_iso_date, format_time_of_day, parse_iso_date, to_epoch_ms
from ..core.constants import VIRTUAL_REF_PREFIX
from ..core.enums import PunchKind, ReviewStatus, Slot
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PersistedRef:
    """A punch that exists in the punch store."""

    event_id: int

    def token(self) -> str:
        return str(self.event_id)


@dataclass(frozen=True)
class VirtualRef:
    """A synthesized close-out that only exists as a computed projection.

    It is identified by the session it closes; the review service turns it
    into a stored punch (materializes it) before changing its status.
    """

    subject_id: int
    work_date: date
    slot: Slot

    def token(self) -> str:
        return f"{VIRTUAL_REF_PREFIX}:{self.subject_id}:{format_iso_date(self.work_date)}:{self.slot.value}"


EventRef = Union[PersistedRef, VirtualRef]


def parse_event_ref(value: object) -> EventRef:
    """Parse an API event id: an integer or a ``virtual:<subject>:<date>:<slot>`` token."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid event id: {value!r}")
    if isinstance(value, int):
        if value <= 0:
            raise ValidationError(f"Invalid event id: {value!r}")
        return PersistedRef(value)

    text = str(value or "").strip()
    if text.isdigit():
        return parse_event_ref(int(text))

    parts = text.split(":")
    if len(parts) != 4 or parts[0] != VIRTUAL_REF_PREFIX:
        raise ValidationError(f"Invalid event id: {value!r}")
    try:
        return VirtualRef(subject_id=int(parts[1]), work_date=parse_iso_date(parts[2]), slot=Slot(parts[3]))
    except ValueError:
        raise ValidationError(f"Invalid event id: {value!r}")


@dataclass(frozen=True)
class WindowSnapshot:
    """Official window captured into the ledger, as wall-clock times."""

    start: time
    end: time

    def as_strings(self) -> tuple[str, str]:
        return format_time_of_day(self.start), format_time_of_day(self.end)


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one camera-verified time punch."""

    ref: EventRef
    subject_id: int
    kind: PunchKind
    occurred_at: datetime
    status: ReviewStatus = ReviewStatus.PENDING
    evidence_ref: Optional[str] = None
    reviewer_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    validated_minutes: Optional[int] = None
    window_snapshot: Optional[WindowSnapshot] = None
    is_synthetic: bool = False

    @property
    def is_virtual(self) -> bool:
        return isinstance(self.ref, VirtualRef)

    @property
    def event_id(self) -> Optional[int]:
        if isinstance(self.ref, PersistedRef):
            return self.ref.event_id
        return None

    def with_status(self, status: ReviewStatus) -> "PunchEvent":
        return replace(self, status=status)

    def to_dict(self) -> dict:
        snapshot = self.window_snapshot.as_strings() if self.window_snapshot else None
        return {
            "id": self.ref.token(),
            "subject_id": self.subject_id,
            "kind": self.kind.value,
            "occurred_at": to_epoch_ms(self.occurred_at),
            "status": self.status.value,
            "evidence_ref": self.evidence_ref,
            "reviewer_id": self.reviewer_id,
            "reviewed_at": to_epoch_ms(self.reviewed_at) if self.reviewed_at else None,
            "validated_minutes": self.validated_minutes,
            "official_window": list(snapshot) if snapshot else None,
            "is_synthetic": self.is_synthetic,
            "is_virtual": self.is_virtual,
        }
