from __future__ import annotations

from datetime import time
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..settings.model import AcademicTerm
from .model import NewSchedule, Room, Schedule, Subject
from .repository import ScheduleRepository

_SELECT_SCHEDULE = """
    SELECT cs.schedule_id, cs.subject_id, sub.subject_code, sub.subject_name, sub.instructor_id,
           cs.room_id, r.room_number, cs.day_of_week, cs.start_time, cs.end_time,
           cs.academic_year, cs.semester
    FROM class_schedules cs
    JOIN subjects sub ON sub.subject_id = cs.subject_id
    JOIN rooms r ON r.room_id = cs.room_id
"""


def _to_schedule(r: Dict[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(r["schedule_id"]),
        subject_id=int(r["subject_id"]),
        subject_code=r["subject_code"],
        subject_name=r["subject_name"],
        room_id=int(r["room_id"]),
        room_number=str(r["room_number"]),
        day_of_week=r["day_of_week"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        academic_year=r["academic_year"],
        semester=r["semester"],
        instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_SCHEDULE + " WHERE cs.schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_room(self, room_id: int) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT room_id, room_number, room_name FROM rooms WHERE room_id=%s", (int(room_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Room(room_id=int(r["room_id"]), room_number=str(r["room_number"]), room_name=r.get("room_name"))

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, subject_code, subject_name, instructor_id FROM subjects WHERE subject_id=%s",
                (int(subject_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Subject(
                subject_id=int(r["subject_id"]),
                subject_code=r["subject_code"],
                subject_name=r["subject_name"],
                instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
            )

    def ensure_subject(self, *, code: str, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # INSERT IGNORE keeps concurrent first calls from failing on the unique code.
            cur.execute("INSERT IGNORE INTO subjects(subject_code, subject_name) VALUES(%s,%s)", (code, name))
            cur.execute("SELECT subject_id FROM subjects WHERE subject_code=%s", (code,))
            return int(fetchone(cur)["subject_id"])

    def list_for_subject_room(self, *, subject_id: int, room_id: int, term: AcademicTerm) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE
                + """
                WHERE cs.subject_id=%s AND cs.room_id=%s AND cs.academic_year=%s AND cs.semester=%s
                ORDER BY FIELD(cs.day_of_week,'Monday','Tuesday','Wednesday','Thursday','Friday','Saturday','Sunday')
                """,
                (int(subject_id), int(room_id), term.academic_year, term.semester),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_for_room_day(self, *, room_id: int, day_of_week: str, term: AcademicTerm) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE
                + """
                WHERE cs.room_id=%s AND cs.day_of_week=%s AND cs.academic_year=%s AND cs.semester=%s
                ORDER BY cs.start_time ASC
                """,
                (int(room_id), day_of_week, term.academic_year, term.semester),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_for_term(self, term: AcademicTerm) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE
                + """
                WHERE cs.academic_year=%s AND cs.semester=%s
                ORDER BY cs.end_time ASC
                """,
                (term.academic_year, term.semester),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def find_by_room_number_and_start(self, *, room_number: str, start_time: time) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_SCHEDULE + " WHERE r.room_number=%s AND cs.start_time=%s",
                (room_number, start_time),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def create(self, new: NewSchedule) -> Schedule:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_schedules(subject_id, room_id, day_of_week, start_time, end_time, academic_year, semester)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.subject_id),
                    int(new.room_id),
                    new.day_of_week,
                    new.start_time,
                    new.end_time,
                    new.term.academic_year,
                    new.term.semester,
                ),
            )
            schedule_id = int(cur.lastrowid)
            cur.execute(_SELECT_SCHEDULE + " WHERE cs.schedule_id=%s", (schedule_id,))
            r = fetchone(cur)
            if not r:
                raise DuplicateRecordError(f"schedule {schedule_id} vanished after insert")
            return _to_schedule(r)

    def insert_ignore(self, rows: Sequence[NewSchedule]) -> int:
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO class_schedules(subject_id, room_id, day_of_week, start_time, end_time, academic_year, semester)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        int(n.subject_id),
                        int(n.room_id),
                        n.day_of_week,
                        n.start_time,
                        n.end_time,
                        n.term.academic_year,
                        n.term.semester,
                    )
                    for n in rows
                ],
            )
            return int(cur.rowcount or 0)
