"""
Single transient notification slot per view.
Success notices expire after settings.notice_ttl_seconds; errors stay until
the next action clears the slot.
"""
import time
from dataclasses import dataclass
from typing import Callable

from backend.app.core.config import settings


@dataclass(frozen=True)
class Notice:
    kind: str  # success | error | info
    text: str
    expires_at: float | None = None


class NotificationSlot:
    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self._ttl = settings.notice_ttl_seconds if ttl is None else ttl
        self._clock = clock
        self._notice: Notice | None = None

    def success(self, text: str) -> None:
        self._notice = Notice("success", text, self._clock() + self._ttl)

    def info(self, text: str) -> None:
        self._notice = Notice("info", text)

    def error(self, text: str) -> None:
        self._notice = Notice("error", text)

    def clear(self) -> None:
        self._notice = None

    @property
    def current(self) -> Notice | None:
        notice = self._notice
        if notice and notice.expires_at is not None and self._clock() >= notice.expires_at:
            self._notice = None
            return None
        return notice

    @property
    def message(self) -> str:
        notice = self.current
        return notice.text if notice else ""
