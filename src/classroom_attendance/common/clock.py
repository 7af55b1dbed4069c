from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall-clock time of the server."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to a given instant; tests move it with ``advance``."""

    def __init__(self, current: datetime):
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, *, minutes: int = 0, seconds: int = 0) -> datetime:
        self._current = self._current + timedelta(minutes=minutes, seconds=seconds)
        return self._current
