from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, AuthMethod, Location, ScanType
from ..settings.model import AcademicTerm
from .model import AttendanceRecord, AwaitingStats


class AttendanceRepository(Protocol):
    def find_primary(self, user_id: int, schedule_id: int, on_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert one row.

        Primary scan types occupy the (user, schedule, date) slot; a second
        primary row for the same slot raises DuplicateRecordError.
        """

        raise NotImplementedError

    def confirm(
        self,
        attendance_id: int,
        *,
        status: AttendanceStatus,
        scan_type: ScanType,
        location: Location,
        session_id: Optional[int] = None,
    ) -> bool:
        """Settle a provisional row in place. The original scan_time is kept."""

        raise NotImplementedError

    def latest_primary_on_date(
        self, user_id: int, on_date: date, *, schedule_id: Optional[int] = None
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_users_on_date(self, user_ids: Iterable[int], on_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def promote_awaiting(
        self,
        schedule_ids: Sequence[int],
        on_date: date,
        *,
        status: AttendanceStatus,
        scan_type: Optional[ScanType] = None,
        session_id: Optional[int] = None,
    ) -> int:
        """Move Awaiting Confirmation rows of the schedules/date to ``status``. Returns rows changed."""

        raise NotImplementedError

    def awaiting_stats(self, on_date: date) -> AwaitingStats:
        raise NotImplementedError
