from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.clock import Clock, SystemClock
from ..common.validators import fingerprint_identifier, require_non_empty
from ..core.enums import AttendanceStatus, AuthMethod, Location, Role, ScanType
from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..doors.dispatcher import DoorLockDispatcher, NullDoorLockDispatcher
from ..schedules.model import Room, Schedule
from ..schedules.resolver import ScheduleResolver
from ..sessions.service import SessionService
from ..settings.model import AttendanceSettings
from ..settings.service import SettingsProvider
from ..users.model import User
from ..users.repository import UserDirectory
from .classifier import classify_scan
from .factory import ScanStrategyFactory
from .model import (
    AttendanceRecord,
    AwaitingStats,
    ClassificationPolicy,
    EarlyArrivalResult,
    ScanDraft,
    ScanResult,
    ScheduleWindow,
)
from .repository import AttendanceRepository
from .store import AttendanceStore

logger = logging.getLogger(__name__)

# Roles whose time_in opens the class session and whose time_out closes it.
SESSION_OPENERS = frozenset({Role.INSTRUCTOR, Role.ADMIN, Role.DEAN})
# Roles whose scans also unlock the door.
DOOR_OPENERS = frozenset({Role.INSTRUCTOR, Role.ADMIN})


class AttendanceService:
    """Turns a scan event into an attendance record.

    resolve schedule -> check enrollment -> classify -> store, plus the side
    effects: session start/end for instructors and the door-lock request.
    """

    def __init__(
        self,
        *,
        attendance: AttendanceRepository,
        users: UserDirectory,
        resolver: ScheduleResolver,
        sessions: SessionService,
        settings: SettingsProvider,
        store: Optional[AttendanceStore] = None,
        doors: Optional[DoorLockDispatcher] = None,
        clock: Optional[Clock] = None,
        strategy_factory: Optional[ScanStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._resolver = resolver
        self._sessions = sessions
        self._settings = settings
        self._store = store or AttendanceStore(attendance)
        self._doors = doors or NullDoorLockDispatcher()
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or ScanStrategyFactory()

    def identify(
        self, auth_method: AuthMethod, *, identifier: Optional[str] = None, fingerprint_id: Optional[int] = None
    ) -> User:
        if auth_method == AuthMethod.FINGERPRINT and fingerprint_id is not None:
            identifier = fingerprint_identifier(fingerprint_id)
        identifier = require_non_empty(identifier, "identifier")

        user = self._users.get_by_credential(auth_method, identifier)
        if user is None:
            logger.info("Scan denied: unknown %s identifier %s", auth_method.value, identifier)
            raise NotFoundError(f"No user registered for {auth_method.value} {identifier}")
        if not user.is_active:
            logger.info("Scan denied: user %s is inactive", user.user_id)
            raise ForbiddenError("User account is inactive")
        return user

    def submit_scan(
        self,
        *,
        auth_method: AuthMethod,
        room_id: int,
        identifier: Optional[str] = None,
        fingerprint_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        scan_type: ScanType = ScanType.TIME_IN,
        location: Location = Location.INSIDE,
    ) -> ScanResult:
        now = self._clock.now()
        settings = self._settings.current()
        user = self.identify(auth_method, identifier=identifier, fingerprint_id=fingerprint_id)
        room = self._resolver.room(room_id)

        if scan_type == ScanType.TIME_OUT:
            schedule = self._resolve_for_time_out(user, room_id, now, settings, subject_id)
            self._open_door(user, room)
            record = self._store.record_time_out(
                ScanDraft(
                    user_id=user.user_id,
                    schedule_id=schedule.schedule_id if schedule else None,
                    scan_time=now,
                    auth_method=auth_method,
                    location=location,
                    term=settings.term,
                )
            )
            if schedule is not None and user.role in SESSION_OPENERS and not schedule.is_administrative:
                self._sessions.end_active(schedule, at=now)
        elif scan_type == ScanType.TIME_IN:
            schedule = self._resolver.resolve(
                user=user, room_id=room_id, at=now, settings=settings, subject_id=subject_id
            )
            self._require_enrollment(user, schedule, settings)
            self._open_door(user, room)
            record = self._record_time_in(user, schedule, now, settings, auth_method, location)
        else:
            raise ValidationError(f"Unsupported scan type: {scan_type.value}")

        logger.info(
            "Scan accepted: user=%s role=%s room=%s schedule=%s %s -> %s",
            user.user_id,
            user.role.value,
            room.room_number,
            record.schedule_id,
            record.scan_type.value,
            record.status.value,
        )
        return ScanResult(
            attendance_id=record.attendance_id,
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            status=record.status,
            scan_type=record.scan_type,
            scan_time=record.scan_time,
            room_number=room.room_number,
            subject_code=schedule.subject_code if schedule else None,
            subject_name=schedule.subject_name if schedule else None,
            session_id=record.session_id,
        )

    def early_arrival_scan(
        self,
        *,
        auth_method: AuthMethod,
        room_id: int,
        identifier: Optional[str] = None,
        fingerprint_id: Optional[int] = None,
    ) -> EarlyArrivalResult:
        now = self._clock.now()
        settings = self._settings.current()
        user = self.identify(auth_method, identifier=identifier, fingerprint_id=fingerprint_id)
        if user.role != Role.STUDENT:
            raise ForbiddenError("Early arrival scans are for students only")

        room = self._resolver.room(room_id)
        schedule = self._resolver.next_upcoming(room_id=room.room_id, at=now, term=settings.term)
        if schedule is None:
            raise NotFoundError(f"No upcoming class in room {room.room_number} today")
        self._require_enrollment(user, schedule, settings)

        record = self._record_time_in(
            user, schedule, now, settings, auth_method, Location.INSIDE, early_entry=True
        )
        logger.info(
            "Early arrival: user=%s %s at %s -> %s",
            user.user_id,
            schedule.label,
            now.strftime("%H:%M"),
            record.status.value,
        )
        return EarlyArrivalResult(
            attendance_id=record.attendance_id,
            status=record.status,
            scan_time=record.scan_time,
            room_number=room.room_number,
            subject_code=schedule.subject_code,
            subject_name=schedule.subject_name,
            class_start=schedule.start_time,
            class_end=schedule.end_time,
        )

    def awaiting_stats(self, on_date: Optional[date] = None) -> AwaitingStats:
        return self._attendance.awaiting_stats(on_date or self._clock.now().date())

    def _record_time_in(
        self,
        user: User,
        schedule: Schedule,
        now,
        settings: AttendanceSettings,
        auth_method: AuthMethod,
        location: Location,
        *,
        early_entry: bool = False,
    ) -> AttendanceRecord:
        session = self._sessions.for_day(schedule, now.date())
        if (
            not early_entry
            and session is None
            and user.role in SESSION_OPENERS
            and not schedule.is_administrative
        ):
            session = self._sessions.start(schedule, instructor_id=user.user_id, at=now)

        session_active = session is not None and session.is_active
        window = ScheduleWindow.for_schedule(schedule, now.date())
        policy = ClassificationPolicy.from_settings(settings)

        def decide(existing):
            return classify_scan(
                role=user.role,
                scan_time=now,
                window=window,
                policy=policy,
                existing=existing,
                session_active=session_active,
                location=location,
                early_entry=early_entry,
                factory=self._factory,
            )

        draft = ScanDraft(
            user_id=user.user_id,
            schedule_id=schedule.schedule_id,
            scan_time=now,
            auth_method=auth_method,
            location=location,
            term=settings.term,
            session_id=session.session_id if session_active else None,
        )
        record = self._store.record_primary(draft, decide)
        if record.status == AttendanceStatus.AWAITING_CONFIRMATION:
            record = self._settle_if_session_started(schedule, record)
        return record

    def _settle_if_session_started(self, schedule: Schedule, record: AttendanceRecord) -> AttendanceRecord:
        # A session opened after our lookup may have promoted before this row existed.
        session = self._sessions.for_day(schedule, record.record_date)
        if session is None:
            return record
        if self._sessions.confirm_early_arrivals(schedule, session):
            logger.info("Awaiting record %s confirmed by session %s started meanwhile", record.attendance_id, session.session_id)
        return self._attendance.find_primary(record.user_id, schedule.schedule_id, record.record_date) or record

    def _open_door(self, user: User, room: Room) -> None:
        # Before the write: a rejected duplicate scan still lets the instructor in.
        if user.role in DOOR_OPENERS:
            self._doors.open_door(room, requested_by=user.full_name)

    def _require_enrollment(self, user: User, schedule: Schedule, settings: AttendanceSettings) -> None:
        if user.role != Role.STUDENT or schedule.is_administrative:
            return
        if not self._users.is_enrolled(user.user_id, schedule.subject_id, settings.term):
            logger.info("Scan denied: user %s not enrolled in %s", user.user_id, schedule.subject_code)
            raise ForbiddenError(f"Student is not enrolled in {schedule.label}")

    def _resolve_for_time_out(
        self, user: User, room_id: int, now, settings: AttendanceSettings, subject_id: Optional[int]
    ) -> Optional[Schedule]:
        try:
            return self._resolver.resolve(user=user, room_id=room_id, at=now, settings=settings, subject_id=subject_id)
        except NotFoundError:
            logger.debug("time_out by user %s in room %s has no schedule", user.user_id, room_id)
            return None
