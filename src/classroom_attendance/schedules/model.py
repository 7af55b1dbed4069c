from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import ADMIN_SUBJECT_CODE
from ..settings.model import AcademicTerm


@dataclass(frozen=True)
class Room:
    room_id: int
    room_number: str
    room_name: Optional[str] = None


@dataclass(frozen=True)
class Subject:
    subject_id: int
    subject_code: str
    subject_name: str
    instructor_id: Optional[int] = None


@dataclass(frozen=True)
class Schedule:
    """A recurring weekly class slot (joined with its subject and room)."""

    schedule_id: int
    subject_id: int
    subject_code: str
    subject_name: str
    room_id: int
    room_number: str
    day_of_week: str
    start_time: time
    end_time: time
    academic_year: str
    semester: str
    instructor_id: Optional[int] = None

    @property
    def is_administrative(self) -> bool:
        return self.subject_code == ADMIN_SUBJECT_CODE

    @property
    def term(self) -> AcademicTerm:
        return AcademicTerm(self.academic_year, self.semester)

    @property
    def label(self) -> str:
        return f"{self.subject_code} - {self.subject_name}"

    def starts_at(self, on_date: date) -> datetime:
        return datetime.combine(on_date, self.start_time)

    def ends_at(self, on_date: date) -> datetime:
        return datetime.combine(on_date, self.end_time)


@dataclass(frozen=True)
class NewSchedule:
    subject_id: int
    room_id: int
    day_of_week: str
    start_time: time
    end_time: time
    term: AcademicTerm
