from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus, AuthMethod, Location, Role, ScanType
from ..schedules.model import Schedule
from ..settings.model import AcademicTerm, AttendanceSettings


@dataclass(frozen=True)
class AttendanceRecord:
    """One stored scan. A user's day in a class is one primary row plus optional time_out rows."""

    attendance_id: int
    user_id: int
    schedule_id: Optional[int]
    session_id: Optional[int]
    scan_type: ScanType
    scan_time: datetime
    record_date: date
    status: AttendanceStatus
    auth_method: AuthMethod
    location: Location
    academic_year: str
    semester: str

    @property
    def is_primary(self) -> bool:
        return self.scan_type.is_primary


@dataclass(frozen=True)
class ScanDraft:
    """Everything known about a scan before its status is decided."""

    user_id: int
    schedule_id: Optional[int]
    scan_time: datetime
    auth_method: AuthMethod
    location: Location
    term: AcademicTerm
    session_id: Optional[int] = None

    @property
    def record_date(self) -> date:
        return self.scan_time.date()


@dataclass(frozen=True)
class ScheduleWindow:
    """A schedule pinned to one date."""

    start: datetime
    end: datetime
    administrative: bool = False

    @classmethod
    def for_schedule(cls, schedule: Schedule, on_date: date) -> "ScheduleWindow":
        return cls(
            start=schedule.starts_at(on_date),
            end=schedule.ends_at(on_date),
            administrative=schedule.is_administrative,
        )


@dataclass(frozen=True)
class ClassificationPolicy:
    early_arrival_minutes: int
    late_threshold_minutes: int

    @classmethod
    def from_settings(cls, settings: AttendanceSettings) -> "ClassificationPolicy":
        return cls(
            early_arrival_minutes=settings.early_arrival_minutes,
            late_threshold_minutes=settings.late_threshold_minutes,
        )

    def opens_at(self, window: ScheduleWindow) -> datetime:
        return window.start - timedelta(minutes=self.early_arrival_minutes)

    def late_from(self, window: ScheduleWindow) -> datetime:
        return window.start + timedelta(minutes=self.late_threshold_minutes)


@dataclass(frozen=True)
class ScanResult:
    attendance_id: int
    user_id: int
    full_name: str
    role: Role
    status: AttendanceStatus
    scan_type: ScanType
    scan_time: datetime
    room_number: str
    subject_code: Optional[str]
    subject_name: Optional[str]
    session_id: Optional[int] = None


@dataclass(frozen=True)
class EarlyArrivalResult:
    attendance_id: int
    status: AttendanceStatus
    scan_time: datetime
    room_number: str
    subject_code: str
    subject_name: str
    class_start: time
    class_end: time


@dataclass(frozen=True)
class AwaitingStats:
    on_date: date
    records: int
    schedules: int
    students: int
