from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..settings.model import AcademicTerm
from .model import NewSchedule, Room, Schedule, Subject


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def get_room(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def ensure_subject(self, *, code: str, name: str) -> int:
        """Return the subject id for ``code``, creating the subject if needed."""

        raise NotImplementedError

    def list_for_subject_room(self, *, subject_id: int, room_id: int, term: AcademicTerm) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_for_room_day(self, *, room_id: int, day_of_week: str, term: AcademicTerm) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_for_term(self, term: AcademicTerm) -> Sequence[Schedule]:
        """Every schedule of the term, whatever its weekday, ordered by end time."""

        raise NotImplementedError

    def find_by_room_number_and_start(self, *, room_number: str, start_time: time) -> Sequence[Schedule]:
        raise NotImplementedError

    def create(self, new: NewSchedule) -> Schedule:
        """Insert one schedule. Raises DuplicateRecordError on a slot clash."""

        raise NotImplementedError

    def insert_ignore(self, rows: Sequence[NewSchedule]) -> int:
        """Insert rows, silently skipping ones that already exist. Returns rows inserted."""

        raise NotImplementedError
