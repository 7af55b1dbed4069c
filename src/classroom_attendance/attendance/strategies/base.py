from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ...core.enums import AttendanceStatus, Location, Role, ScanType
from ..model import AttendanceRecord, ClassificationPolicy, ScheduleWindow


class ScanAction(str, Enum):
    CREATE = "create"
    CONFIRM = "confirm"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    scan_type: ScanType
    action: ScanAction = ScanAction.CREATE
    note: Optional[str] = None


@dataclass(frozen=True)
class ScanFacts:
    """Inputs of one classification. ``scan_time`` is already floored to the minute."""

    role: Role
    scan_time: datetime
    window: ScheduleWindow
    policy: ClassificationPolicy
    existing: Optional[AttendanceRecord] = None
    session_active: bool = False
    location: Location = Location.INSIDE
    early_entry: bool = False

    @property
    def opens_at(self) -> datetime:
        return self.policy.opens_at(self.window)

    @property
    def late_from(self) -> datetime:
        return self.policy.late_from(self.window)


class ScanStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide(self, facts: ScanFacts) -> StatusDecision:
        raise NotImplementedError
