from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import OvertimeGrant


class OvertimeRepository(Protocol):
    def get(self, *, subject_id: int, work_date: date) -> Optional[OvertimeGrant]:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start: date,
        end: date,
        subject_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[OvertimeGrant]:
        raise NotImplementedError

    def create(self, grant: OvertimeGrant) -> bool:
        """Returns False when a grant already exists for the subject and date."""

        raise NotImplementedError

    def update_window(self, *, subject_id: int, work_date: date, start: datetime, end: datetime) -> bool:
        raise NotImplementedError

    def delete(self, *, subject_id: int, work_date: date) -> bool:
        raise NotImplementedError
