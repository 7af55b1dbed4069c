from __future__ import annotations

import logging
from datetime import date, time
from typing import Dict, Iterable, List, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus, ScanType
from ..schedules.model import Schedule
from ..schedules.resolver import ScheduleResolver
from ..schedules.session_key import SessionKey
from ..sessions.repository import SessionRepository
from ..users.model import User
from ..users.repository import UserDirectory
from .model import Roster, RosterRow, RosterStats

logger = logging.getLogger(__name__)

PRESENT_EQUIVALENT = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.EARLY_ARRIVAL})


def _order(record: AttendanceRecord):
    return (record.scan_time, record.attendance_id)


def display_status(record: Optional[AttendanceRecord]) -> AttendanceStatus:
    if record is None:
        return AttendanceStatus.ABSENT
    if record.scan_type == ScanType.EARLY_ARRIVAL:
        return AttendanceStatus.EARLY_ARRIVAL
    return record.status


def aggregate_user(user: User, schedule_id: int, records: Iterable[AttendanceRecord]) -> RosterRow:
    """Fold one user's records of a day into a roster row.

    ``records`` may include rows for other schedules of the same day; they
    are needed to attribute time_out scans that carry no schedule.
    """

    mine = sorted((r for r in records if r.user_id == user.user_id), key=_order)
    primaries = [r for r in mine if r.is_primary and r.schedule_id == schedule_id]

    latest = primaries[-1] if primaries else None
    early = [r for r in primaries if r.scan_type.is_early]
    sign_in = (early or primaries)[0].scan_time if primaries else None

    sign_out = None
    for r in mine:
        if r.scan_type != ScanType.TIME_OUT:
            continue
        if r.schedule_id == schedule_id or (r.schedule_id is None and _follows_sign_in(r, mine, schedule_id)):
            sign_out = r.scan_time

    return RosterRow(
        user_id=user.user_id,
        full_name=user.full_name,
        role=user.role,
        status=display_status(latest),
        sign_in=sign_in,
        sign_out=sign_out,
    )


def _follows_sign_in(time_out: AttendanceRecord, mine: Sequence[AttendanceRecord], schedule_id: int) -> bool:
    # An unassigned time_out belongs to whichever class the user last signed into before it.
    before = [r for r in mine if r.is_primary and _order(r) <= _order(time_out)]
    return bool(before) and before[-1].schedule_id == schedule_id


def summarize(rows: Iterable[RosterRow]) -> RosterStats:
    present = late = absent = total = 0
    for row in rows:
        total += 1
        if row.status in PRESENT_EQUIVALENT:
            present += 1
        elif row.status == AttendanceStatus.LATE:
            late += 1
        elif row.status == AttendanceStatus.ABSENT:
            absent += 1
    return RosterStats(present=present, late=late, absent=absent, total=total)


class RosterAggregator:
    """Builds the roster of one class meeting. Never writes."""

    def __init__(
        self,
        *,
        users: UserDirectory,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        resolver: ScheduleResolver,
    ):
        self._users = users
        self._attendance = attendance
        self._sessions = sessions
        self._resolver = resolver

    def build(self, schedule: Schedule, on_date: date) -> Roster:
        enrolled = list(self._users.list_enrolled(schedule.subject_id, schedule.term))
        instructor = self._users.get_by_id(schedule.instructor_id) if schedule.instructor_id else None

        people: List[User] = enrolled + ([instructor] if instructor else [])
        records = self._attendance.list_for_users_on_date([u.user_id for u in people], on_date)
        by_user: Dict[int, List[AttendanceRecord]] = {}
        for r in records:
            by_user.setdefault(r.user_id, []).append(r)

        rows = [aggregate_user(u, schedule.schedule_id, by_user.get(u.user_id, [])) for u in enrolled]
        rows.sort(key=lambda row: row.full_name.lower())

        roster = Roster(
            schedule=schedule,
            session_date=on_date,
            session=self._sessions.get_for_schedule(schedule.schedule_id, on_date),
            rows=rows,
            stats=summarize(rows),
            instructor=(
                aggregate_user(instructor, schedule.schedule_id, by_user.get(instructor.user_id, []))
                if instructor
                else None
            ),
        )
        logger.debug(
            "Roster %s on %s: %d enrolled, %d present, %d late",
            schedule.label,
            on_date,
            roster.stats.total,
            roster.stats.present,
            roster.stats.late,
        )
        return roster

    def for_key(self, key: SessionKey) -> Roster:
        schedule, _ = self._resolver.for_session_key(key)
        return self.build(schedule, key.session_date)

    def for_session_key(self, raw_key: str) -> Roster:
        return self.for_key(SessionKey.parse(raw_key))

    def for_slot(self, *, on_date: date, room_number: str, start_time: time) -> Roster:
        return self.for_key(SessionKey(session_date=on_date, room_number=room_number, start_time=start_time))
