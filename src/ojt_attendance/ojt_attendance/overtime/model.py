from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.datetime_utils import format_iso_date, to_epoch_ms


@dataclass(frozen=True)
class OvertimeGrant:
    """Authorization unlocking the overtime window for one subject on one date."""

    subject_id: int
    work_date: date
    start: datetime
    end: datetime
    created_by: str

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "date": format_iso_date(self.work_date),
            "start": to_epoch_ms(self.start),
            "end": to_epoch_ms(self.end),
            "created_by": self.created_by,
        }
