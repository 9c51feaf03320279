from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..core.enums import ChangeTopic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeNotice:
    """Hint that something changed. Listeners re-read state; the payload is not authoritative."""

    topic: ChangeTopic
    subject_id: Optional[int] = None
    work_date: Optional[date] = None


Listener = Callable[[ChangeNotice], None]


class ChangeChannel:
    """In-process fan-out of change notices."""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, notice: ChangeNotice) -> None:
        with self._lock:
            listeners = list(self._listeners)
        logger.debug("Change notice %s subject=%s date=%s", notice.topic.value, notice.subject_id, notice.work_date)
        for listener in listeners:
            try:
                listener(notice)
            except Exception:
                # A broken listener must not fail the write that published the notice.
                logger.exception("Change listener %r failed", listener)
