from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import AttendanceStatus, AuthMethod, Location, ScanType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from ..settings.model import AcademicTerm
from .model import AttendanceRecord, AwaitingStats
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, user_id, schedule_id, session_id, scan_type, scan_time, record_date, "
    "status, auth_method, location, academic_year, semester"
)

_PRIMARY_TYPES = tuple(t.value for t in ScanType if t.is_primary)


def primary_slot(user_id: int, schedule_id: Optional[int], on_date: date) -> Optional[str]:
    if schedule_id is None:
        return None
    return f"{int(user_id)}:{int(schedule_id)}:{on_date.isoformat()}"


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        schedule_id=_opt_int(r.get("schedule_id")),
        session_id=_opt_int(r.get("session_id")),
        scan_type=ScanType(r["scan_type"]),
        scan_time=r["scan_time"],
        record_date=r["record_date"],
        status=AttendanceStatus(r["status"]),
        auth_method=AuthMethod(r["auth_method"]),
        location=Location(r["location"]),
        academic_year=r["academic_year"],
        semester=r["semester"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_primary(self, user_id: int, schedule_id: int, on_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE primary_slot=%s",
                (primary_slot(user_id, schedule_id, on_date),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(
        self,
        *,
        user_id: int,
        schedule_id: Optional[int],
        session_id: Optional[int],
        scan_type: ScanType,
        scan_time: datetime,
        status: AttendanceStatus,
        auth_method: AuthMethod,
        location: Location,
        term: AcademicTerm,
    ) -> AttendanceRecord:
        record_date = scan_time.date()
        slot = primary_slot(user_id, schedule_id, record_date) if scan_type.is_primary else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, schedule_id, session_id, scan_type, scan_time, record_date, status,
                    auth_method, location, academic_year, semester, primary_slot
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    schedule_id,
                    session_id,
                    scan_type.value,
                    scan_time,
                    record_date,
                    status.value,
                    auth_method.value,
                    location.value,
                    term.academic_year,
                    term.semester,
                    slot,
                ),
            )
            return AttendanceRecord(
                attendance_id=int(cur.lastrowid),
                user_id=int(user_id),
                schedule_id=schedule_id,
                session_id=session_id,
                scan_type=scan_type,
                scan_time=scan_time,
                record_date=record_date,
                status=status,
                auth_method=auth_method,
                location=location,
                academic_year=term.academic_year,
                semester=term.semester,
            )

    def confirm(
        self,
        attendance_id: int,
        *,
        status: AttendanceStatus,
        scan_type: ScanType,
        location: Location,
        session_id: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, scan_type=%s, location=%s, session_id=COALESCE(%s, session_id)
                WHERE attendance_id=%s AND status=%s
                """,
                (
                    status.value,
                    scan_type.value,
                    location.value,
                    session_id,
                    int(attendance_id),
                    AttendanceStatus.AWAITING_CONFIRMATION.value,
                ),
            )
            return cur.rowcount > 0

    def latest_primary_on_date(
        self, user_id: int, on_date: date, *, schedule_id: Optional[int] = None
    ) -> Optional[AttendanceRecord]:
        sql = (
            f"SELECT {_COLUMNS} FROM attendance_records "
            f"WHERE user_id=%s AND record_date=%s AND scan_type IN ({in_clause(_PRIMARY_TYPES)})"
        )
        params = [int(user_id), on_date, *_PRIMARY_TYPES]
        if schedule_id is not None:
            sql += " AND schedule_id=%s"
            params.append(int(schedule_id))
        sql += " ORDER BY scan_time DESC, attendance_id DESC LIMIT 1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_users_on_date(self, user_ids: Iterable[int], on_date: date) -> Sequence[AttendanceRecord]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE record_date=%s AND user_id IN ({in_clause(ids)})
                ORDER BY scan_time ASC, attendance_id ASC
                """,
                (on_date, *ids),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def promote_awaiting(
        self,
        schedule_ids: Sequence[int],
        on_date: date,
        *,
        status: AttendanceStatus,
        scan_type: Optional[ScanType] = None,
        session_id: Optional[int] = None,
    ) -> int:
        ids = [int(s) for s in schedule_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET status=%s,
                    scan_type=COALESCE(%s, scan_type),
                    session_id=COALESCE(%s, session_id)
                WHERE status=%s AND record_date=%s AND schedule_id IN ({in_clause(ids)})
                """,
                (
                    status.value,
                    scan_type.value if scan_type else None,
                    session_id,
                    AttendanceStatus.AWAITING_CONFIRMATION.value,
                    on_date,
                    *ids,
                ),
            )
            return int(cur.rowcount or 0)

    def awaiting_stats(self, on_date: date) -> AwaitingStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS records,
                       COUNT(DISTINCT schedule_id) AS schedules,
                       COUNT(DISTINCT user_id) AS students
                FROM attendance_records
                WHERE status=%s AND record_date=%s
                """,
                (AttendanceStatus.AWAITING_CONFIRMATION.value, on_date),
            )
            r = fetchone(cur) or {}
            return AwaitingStats(
                on_date=on_date,
                records=int(r.get("records") or 0),
                schedules=int(r.get("schedules") or 0),
                students=int(r.get("students") or 0),
            )
