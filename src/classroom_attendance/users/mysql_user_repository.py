from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AuthMethod, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..settings.model import AcademicTerm
from .model import User
from .repository import UserDirectory


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, full_name, role, is_active FROM users WHERE user_id=%s",
                (int(user_id),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_credential(self, method: AuthMethod, identifier: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.role, u.is_active
                FROM auth_methods am
                JOIN users u ON u.user_id = am.user_id
                WHERE am.method_type=%s AND am.identifier=%s AND am.is_active=1
                """,
                (method.value, identifier),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def is_enrolled(self, user_id: int, subject_id: int, term: AcademicTerm) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT enrollment_id
                FROM enrollments
                WHERE user_id=%s AND subject_id=%s AND status='enrolled'
                  AND academic_year=%s AND semester=%s
                """,
                (int(user_id), int(subject_id), term.academic_year, term.semester),
            )
            return fetchone(cur) is not None

    def list_enrolled(self, subject_id: int, term: AcademicTerm) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.role, u.is_active
                FROM enrollments e
                JOIN users u ON u.user_id = e.user_id
                WHERE e.subject_id=%s AND e.status='enrolled'
                  AND e.academic_year=%s AND e.semester=%s
                ORDER BY u.full_name ASC
                """,
                (int(subject_id), term.academic_year, term.semester),
            )
            return [_to_user(r) for r in fetchall(cur)]
