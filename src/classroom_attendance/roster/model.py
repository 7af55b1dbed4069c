from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import AttendanceStatus, Role
from ..schedules.model import Schedule
from ..sessions.model import ClassSession


@dataclass(frozen=True)
class RosterRow:
    user_id: int
    full_name: str
    role: Role
    status: AttendanceStatus
    sign_in: Optional[datetime] = None
    sign_out: Optional[datetime] = None


@dataclass(frozen=True)
class RosterStats:
    present: int = 0
    late: int = 0
    absent: int = 0
    total: int = 0


@dataclass(frozen=True)
class Roster:
    """Read-only projection of one class meeting."""

    schedule: Schedule
    session_date: date
    session: Optional[ClassSession]
    rows: List[RosterRow] = field(default_factory=list)
    stats: RosterStats = RosterStats()
    instructor: Optional[RosterRow] = None
