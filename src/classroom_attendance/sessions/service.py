from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus, ScanType
from ..core.exceptions import DuplicateRecordError
from ..schedules.model import Schedule
from .model import ClassSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Starts and ends class sessions.

    Starting a session settles every provisional early-arrival record of that
    schedule and day: once the instructor is in, those students were there
    before class began.
    """

    def __init__(self, sessions: SessionRepository, attendance: AttendanceRepository):
        self._sessions = sessions
        self._attendance = attendance

    def for_day(self, schedule: Schedule, on_date: date) -> Optional[ClassSession]:
        return self._sessions.get_for_schedule(schedule.schedule_id, on_date)

    def start(self, schedule: Schedule, *, instructor_id: Optional[int], at: datetime) -> ClassSession:
        on_date = at.date()
        existing = self._sessions.get_for_schedule(schedule.schedule_id, on_date)
        if existing:
            return existing

        try:
            session = self._sessions.create(
                schedule_id=schedule.schedule_id,
                room_id=schedule.room_id,
                session_date=on_date,
                started_at=at,
                instructor_id=instructor_id,
            )
        except DuplicateRecordError:
            # Another device started it between our read and insert.
            session = self._sessions.get_for_schedule(schedule.schedule_id, on_date)
            if session is None:
                raise
            return session

        upgraded = self.confirm_early_arrivals(schedule, session)
        logger.info(
            "Session %s started for %s in room %s (%d early arrivals confirmed)",
            session.session_id,
            schedule.label,
            schedule.room_number,
            upgraded,
        )
        return session

    def confirm_early_arrivals(self, schedule: Schedule, session: ClassSession) -> int:
        """Present + early_arrival_upgraded for the schedule's awaiting rows of the session day."""

        return self._attendance.promote_awaiting(
            [schedule.schedule_id],
            session.session_date,
            status=AttendanceStatus.PRESENT,
            scan_type=ScanType.EARLY_ARRIVAL_UPGRADED,
            session_id=session.session_id,
        )

    def end_active(self, schedule: Schedule, *, at: datetime) -> Optional[ClassSession]:
        session = self._sessions.get_for_schedule(schedule.schedule_id, at.date())
        if not session or not session.is_active:
            return None
        if self._sessions.end(session.session_id, ended_at=at):
            logger.info("Session %s ended for %s", session.session_id, schedule.label)
        return session
