from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AcademicTerm:
    academic_year: str
    semester: str

    def __str__(self) -> str:
        return f"{self.academic_year} / {self.semester}"


@dataclass(frozen=True)
class AttendanceSettings:
    """Values the classifier and sweep read on every call."""

    term: AcademicTerm
    early_arrival_minutes: int
    late_threshold_minutes: int
