from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Tuple

from ..common.datetime_utils import day_name, floor_to_minute
from ..core.constants import (
    ADMIN_DAY_END,
    ADMIN_DAY_START,
    ADMIN_SUBJECT_CODE,
    ADMIN_SUBJECT_NAME,
    DEFAULT_CLASS_END,
    DEFAULT_CLASS_START,
    WEEKDAYS,
)
from ..core.exceptions import DuplicateRecordError, NotFoundError
from ..sessions.model import ClassSession
from ..sessions.repository import SessionRepository
from ..settings.model import AcademicTerm, AttendanceSettings
from ..users.model import User
from ..users.repository import UserDirectory
from .model import NewSchedule, Room, Schedule
from .repository import ScheduleRepository
from .resolution import resolution_for
from .session_key import SessionKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanContext:
    user: User
    room: Room
    at: datetime
    settings: AttendanceSettings
    subject_id: Optional[int] = None

    @property
    def on_date(self) -> date:
        return self.at.date()

    @property
    def day_of_week(self) -> str:
        return day_name(self.at.date())


def covers(schedule: Schedule, at: datetime, *, lead_minutes: int = 0) -> bool:
    """True when ``at`` falls in [start - lead, end] on its own date (minute granularity)."""

    t = floor_to_minute(at)
    opens = schedule.starts_at(t.date()) - timedelta(minutes=lead_minutes)
    return opens <= t <= schedule.ends_at(t.date())


class ScheduleResolver:
    """Finds (or synthesizes) the schedule a scan belongs to."""

    def __init__(self, schedules: ScheduleRepository, sessions: SessionRepository, users: UserDirectory):
        self._schedules = schedules
        self._sessions = sessions
        self._users = users

    def room(self, room_id: int) -> Room:
        room = self._schedules.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Unknown room: {room_id}")
        return room

    def resolve(
        self,
        *,
        user: User,
        room_id: int,
        at: datetime,
        settings: AttendanceSettings,
        subject_id: Optional[int] = None,
    ) -> Schedule:
        ctx = ScanContext(user=user, room=self.room(room_id), at=at, settings=settings, subject_id=subject_id)
        schedule = resolution_for(user.role).resolve(self, ctx)
        logger.debug("Resolved %s scan in room %s to schedule %s", user.role.value, ctx.room.room_number, schedule.schedule_id)
        return schedule

    # Building blocks used by the role strategies.

    def for_subject(self, ctx: ScanContext) -> Schedule:
        subject_id = int(ctx.subject_id)
        if self._schedules.get_subject(subject_id) is None:
            raise NotFoundError(f"Unknown subject: {subject_id}")

        found = self._subject_schedule(ctx, subject_id)
        if found:
            return found

        new = NewSchedule(
            subject_id=subject_id,
            room_id=ctx.room.room_id,
            day_of_week=ctx.day_of_week,
            start_time=DEFAULT_CLASS_START,
            end_time=DEFAULT_CLASS_END,
            term=ctx.settings.term,
        )
        try:
            created = self._schedules.create(new)
        except DuplicateRecordError:
            found = self._subject_schedule(ctx, subject_id)
            if found is None:
                raise
            return found
        logger.info("Created default schedule %s for subject %s in room %s", created.schedule_id, subject_id, ctx.room.room_number)
        return created

    def from_active_session(self, ctx: ScanContext) -> Optional[Schedule]:
        session = self._sessions.get_active_in_room(ctx.room.room_id, ctx.on_date)
        if session is None:
            return None
        return self._schedules.get_by_id(session.schedule_id)

    def taught_by(self, ctx: ScanContext, *, lead_minutes: int) -> Optional[Schedule]:
        for schedule in self._classes_in_room(ctx):
            if schedule.instructor_id == ctx.user.user_id and covers(schedule, ctx.at, lead_minutes=lead_minutes):
                return schedule
        return None

    def enrolled_in(self, ctx: ScanContext) -> Optional[Schedule]:
        running = [
            s for s in self._classes_in_room(ctx)
            if covers(s, ctx.at, lead_minutes=ctx.settings.early_arrival_minutes)
        ]
        for schedule in running:
            if self._users.is_enrolled(ctx.user.user_id, schedule.subject_id, ctx.settings.term):
                return schedule
        # Return the class anyway so the caller can say which subject the student is missing.
        return running[0] if running else None

    def next_upcoming(self, *, room_id: int, at: datetime, term: AcademicTerm) -> Optional[Schedule]:
        t = floor_to_minute(at).time()
        upcoming = [
            s for s in self._schedules.list_for_room_day(room_id=room_id, day_of_week=day_name(at.date()), term=term)
            if not s.is_administrative and s.start_time > t
        ]
        return min(upcoming, key=lambda s: s.start_time) if upcoming else None

    def administrative(self, room_id: int, term: AcademicTerm, day_of_week: str) -> Schedule:
        """Get-or-create the all-day ADMIN-ACCESS schedules (Mon-Fri) of a room.

        Safe under concurrent first calls: rows go in with INSERT IGNORE against
        the subject/room/day/term unique key, so a losing racer just re-reads.
        """

        subject_id = self._schedules.ensure_subject(code=ADMIN_SUBJECT_CODE, name=ADMIN_SUBJECT_NAME)
        rows = self._schedules.list_for_subject_room(subject_id=subject_id, room_id=room_id, term=term)

        missing = [d for d in WEEKDAYS if d not in {r.day_of_week for r in rows}]
        if missing:
            inserted = self._schedules.insert_ignore([
                NewSchedule(
                    subject_id=subject_id,
                    room_id=room_id,
                    day_of_week=d,
                    start_time=ADMIN_DAY_START,
                    end_time=ADMIN_DAY_END,
                    term=term,
                )
                for d in missing
            ])
            logger.info("Administrative schedules for room %s (%s): %d created", room_id, term, inserted)
            rows = self._schedules.list_for_subject_room(subject_id=subject_id, room_id=room_id, term=term)

        by_day = {r.day_of_week: r for r in rows}
        schedule = by_day.get(day_of_week) or by_day.get(WEEKDAYS[0])
        if schedule is None:
            raise NotFoundError(f"Administrative schedule missing for room {room_id}")
        return schedule

    def for_session_key(self, key: SessionKey) -> Tuple[Schedule, Optional[ClassSession]]:
        candidates = self._schedules.find_by_room_number_and_start(
            room_number=key.room_number, start_time=key.start_time
        )
        with_session = []
        for schedule in candidates:
            session = self._sessions.get_for_schedule(schedule.schedule_id, key.session_date)
            with_session.append((schedule, session))

        same_day = [p for p in with_session if p[0].day_of_week == day_name(key.session_date)]
        for pool in (
            [p for p in same_day if p[1] is not None],
            [p for p in with_session if p[1] is not None],
            same_day,
        ):
            if pool:
                return pool[0]
        raise NotFoundError(f"No schedule for session {key}")

    def _classes_in_room(self, ctx: ScanContext) -> Sequence[Schedule]:
        return [
            s for s in self._schedules.list_for_room_day(
                room_id=ctx.room.room_id, day_of_week=ctx.day_of_week, term=ctx.settings.term
            )
            if not s.is_administrative
        ]

    def _subject_schedule(self, ctx: ScanContext, subject_id: int) -> Optional[Schedule]:
        rows = self._schedules.list_for_subject_room(
            subject_id=subject_id, room_id=ctx.room.room_id, term=ctx.settings.term
        )
        return self._pick_day(rows, ctx.day_of_week)

    @staticmethod
    def _pick_day(schedules: Sequence[Schedule], day_of_week: str) -> Optional[Schedule]:
        for s in schedules:
            if s.day_of_week == day_of_week:
                return s
        return schedules[0] if schedules else None
