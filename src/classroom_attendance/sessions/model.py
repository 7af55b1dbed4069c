from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class ClassSession:
    """A schedule's meeting on one date, opened when the instructor scans in."""

    session_id: int
    schedule_id: int
    room_id: int
    session_date: date
    status: SessionStatus
    started_at: datetime
    instructor_id: Optional[int] = None
    ended_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE
