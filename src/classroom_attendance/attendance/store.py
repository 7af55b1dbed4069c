from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from ..common.locks import KeyedLock
from ..core.enums import AttendanceStatus, ScanType
from ..core.exceptions import ConflictError, DuplicateRecordError, ValidationError
from .model import AttendanceRecord, ScanDraft
from .repository import AttendanceRepository
from .strategies.base import ScanAction, StatusDecision

logger = logging.getLogger(__name__)

Decide = Callable[[Optional[AttendanceRecord]], StatusDecision]


class AttendanceStore:
    """Write path for attendance rows.

    The read-decide-write of a primary record runs under a lock held per
    (user, schedule, date), and the ``primary_slot`` unique key backs it up
    across processes: a racing insert is retried once, after which the
    caller gets a ``ConflictError``.
    """

    def __init__(self, attendance: AttendanceRepository, *, locks: Optional[KeyedLock] = None):
        self._attendance = attendance
        self._locks = locks or KeyedLock()

    def record_primary(self, draft: ScanDraft, decide: Decide) -> AttendanceRecord:
        if draft.schedule_id is None:
            raise ValidationError("A time-in scan needs a schedule")

        key = (draft.user_id, draft.schedule_id, draft.record_date)
        with self._locks.hold(key):
            try:
                return self._write_primary(draft, decide)
            except DuplicateRecordError:
                logger.info("Primary slot %s taken concurrently, retrying once", key)

            try:
                return self._write_primary(draft, decide)
            except DuplicateRecordError:
                existing = self._attendance.find_primary(draft.user_id, draft.schedule_id, draft.record_date)
                raise ConflictError(
                    "Attendance already recorded for this class today",
                    existing_status=existing.status if existing else None,
                )

    def record_time_out(self, draft: ScanDraft) -> AttendanceRecord:
        """Append a time_out row, borrowing status and session from the matching time-in."""

        match = None
        if draft.schedule_id is not None:
            match = self._attendance.latest_primary_on_date(
                draft.user_id, draft.record_date, schedule_id=draft.schedule_id
            )
        if match is None:
            match = self._attendance.latest_primary_on_date(draft.user_id, draft.record_date)

        record = self._attendance.insert(
            user_id=draft.user_id,
            schedule_id=draft.schedule_id,
            session_id=match.session_id if match else draft.session_id,
            scan_type=ScanType.TIME_OUT,
            scan_time=draft.scan_time,
            status=match.status if match else AttendanceStatus.PRESENT,
            auth_method=draft.auth_method,
            location=draft.location,
            term=draft.term,
        )
        logger.debug(
            "time_out %s for user %s matched time-in %s",
            record.attendance_id,
            draft.user_id,
            match.attendance_id if match else None,
        )
        return record

    def _write_primary(self, draft: ScanDraft, decide: Decide) -> AttendanceRecord:
        existing = self._attendance.find_primary(draft.user_id, draft.schedule_id, draft.record_date)
        decision = decide(existing)

        if decision.action == ScanAction.CONFLICT:
            logger.info(
                "Conflict for user %s on schedule %s: already %s",
                draft.user_id,
                draft.schedule_id,
                existing.status.value if existing else "recorded",
            )
            raise ConflictError(
                f"Attendance already recorded for this class today ({decision.status.value})",
                existing_status=existing.status if existing else decision.status,
            )

        if decision.action == ScanAction.CONFIRM:
            if not self._attendance.confirm(
                existing.attendance_id,
                status=decision.status,
                scan_type=decision.scan_type,
                location=draft.location,
                session_id=draft.session_id,
            ):
                # Settled by the session start or the sweep in the meantime.
                raise ConflictError(
                    "Attendance already confirmed for this class today",
                    existing_status=decision.status,
                )
            return replace(
                existing,
                status=decision.status,
                scan_type=decision.scan_type,
                location=draft.location,
                session_id=draft.session_id if draft.session_id is not None else existing.session_id,
            )

        return self._attendance.insert(
            user_id=draft.user_id,
            schedule_id=draft.schedule_id,
            session_id=draft.session_id,
            scan_type=decision.scan_type,
            scan_time=draft.scan_time,
            status=decision.status,
            auth_method=draft.auth_method,
            location=draft.location,
            term=draft.term,
        )
