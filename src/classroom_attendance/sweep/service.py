from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import floor_to_minute
from ..core.enums import AttendanceStatus
from ..schedules.repository import ScheduleRepository
from ..sessions.repository import SessionRepository
from ..settings.model import AcademicTerm
from ..settings.service import SettingsProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    run_at: datetime
    on_date: date
    updated: int = 0
    schedule_ids: List[int] = field(default_factory=list)


class NoShowSweep:
    """Settles early arrivals of classes that ended without a session.

    A schedule of the term whose end time has passed today with no session
    row today means nobody opened it; its Awaiting Confirmation rows of today
    become Present. The weekday is not checked: a scan naming a subject can be
    filed under that subject's schedule for another day. Only rows still
    awaiting are touched, so re-running is a no-op.
    """

    def __init__(
        self,
        *,
        schedules: ScheduleRepository,
        sessions: SessionRepository,
        attendance: AttendanceRepository,
        settings: SettingsProvider,
        clock: Optional[Clock] = None,
    ):
        self._schedules = schedules
        self._sessions = sessions
        self._attendance = attendance
        self._settings = settings
        self._clock = clock or SystemClock()

    def run(self, now: Optional[datetime] = None, term: Optional[AcademicTerm] = None) -> SweepResult:
        now = floor_to_minute(now or self._clock.now())
        term = term or self._settings.current().term
        today = now.date()

        with_session = self._sessions.schedule_ids_with_session(today)
        ended = [
            s.schedule_id
            for s in self._schedules.list_for_term(term)
            if not s.is_administrative and s.ends_at(today) < now and s.schedule_id not in with_session
        ]
        if not ended:
            logger.debug("Sweep %s: no ended classes without a session", now.strftime("%H:%M"))
            return SweepResult(run_at=now, on_date=today)

        updated = self._attendance.promote_awaiting(ended, today, status=AttendanceStatus.PRESENT)
        if updated:
            logger.info("Sweep %s: %d awaiting record(s) set Present for schedules %s", now.strftime("%H:%M"), updated, ended)
        else:
            logger.debug("Sweep %s: nothing awaiting in schedules %s", now.strftime("%H:%M"), ended)
        return SweepResult(run_at=now, on_date=today, updated=updated, schedule_ids=ended)
