from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Set

from .model import ClassSession


class SessionRepository(Protocol):
    def get_for_schedule(self, schedule_id: int, on_date: date) -> Optional[ClassSession]:
        raise NotImplementedError

    def get_active_in_room(self, room_id: int, on_date: date) -> Optional[ClassSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        schedule_id: int,
        room_id: int,
        session_date: date,
        started_at: datetime,
        instructor_id: Optional[int] = None,
    ) -> ClassSession:
        """Raises DuplicateRecordError when the schedule already has a session that day."""

        raise NotImplementedError

    def end(self, session_id: int, *, ended_at: datetime) -> bool:
        raise NotImplementedError

    def schedule_ids_with_session(self, on_date: date) -> Set[int]:
        raise NotImplementedError
