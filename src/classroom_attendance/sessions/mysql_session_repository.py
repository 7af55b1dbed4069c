from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Set

from ..core.enums import SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ClassSession
from .repository import SessionRepository

_COLUMNS = "session_id, schedule_id, room_id, session_date, status, started_at, instructor_id, ended_at"


def _to_session(r: Dict[str, Any]) -> ClassSession:
    return ClassSession(
        session_id=int(r["session_id"]),
        schedule_id=int(r["schedule_id"]),
        room_id=int(r["room_id"]),
        session_date=r["session_date"],
        status=SessionStatus(r["status"]),
        started_at=r["started_at"],
        instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
        ended_at=r.get("ended_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_schedule(self, schedule_id: int, on_date: date) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_sessions WHERE schedule_id=%s AND session_date=%s",
                (int(schedule_id), on_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_active_in_room(self, room_id: int, on_date: date) -> Optional[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_sessions
                WHERE room_id=%s AND session_date=%s AND status='active'
                ORDER BY started_at ASC
                LIMIT 1
                """,
                (int(room_id), on_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create(
        self,
        *,
        schedule_id: int,
        room_id: int,
        session_date: date,
        started_at: datetime,
        instructor_id: Optional[int] = None,
    ) -> ClassSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_sessions(schedule_id, instructor_id, room_id, session_date, status, started_at)
                VALUES(%s,%s,%s,%s,'active',%s)
                """,
                (int(schedule_id), instructor_id, int(room_id), session_date, started_at),
            )
            return ClassSession(
                session_id=int(cur.lastrowid),
                schedule_id=int(schedule_id),
                room_id=int(room_id),
                session_date=session_date,
                status=SessionStatus.ACTIVE,
                started_at=started_at,
                instructor_id=instructor_id,
            )

    def end(self, session_id: int, *, ended_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE class_sessions SET status='ended', ended_at=%s WHERE session_id=%s AND status='active'",
                (ended_at, int(session_id)),
            )
            return cur.rowcount > 0

    def schedule_ids_with_session(self, on_date: date) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT schedule_id FROM class_sessions WHERE session_date=%s", (on_date,))
            return {int(r["schedule_id"]) for r in fetchall(cur)}
