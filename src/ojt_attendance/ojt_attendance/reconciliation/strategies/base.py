from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from ...core.enums import DurationSource
from ...punches.model import PunchEvent
from ..windows import OfficialWindow


@dataclass(frozen=True)
class DurationContext:
    in_event: PunchEvent
    out_event: PunchEvent
    live_window: Optional[OfficialWindow]
    tz: tzinfo


class DurationStrategy(ABC):
    """Strategy Pattern: one way of measuring a closed session.

    Strategies are tried in order; the first that returns minutes wins and
    ``None`` passes the session on to the next one.
    """

    source: DurationSource

    @abstractmethod
    def minutes(self, ctx: DurationContext) -> Optional[int]:
        raise NotImplementedError
