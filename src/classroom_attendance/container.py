from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.factory import ScanStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.store import AttendanceStore
from .common.clock import Clock, SystemClock
from .core.constants import (
    DEFAULT_ACADEMIC_YEAR,
    DEFAULT_DOOR_LOCK_TIMEOUT_SECONDS,
    DEFAULT_EARLY_ARRIVAL_MINUTES,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_SEMESTER,
    DEFAULT_SWEEP_INTERVAL_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .doors.dispatcher import DoorLockDispatcher, HttpDoorLockDispatcher, NullDoorLockDispatcher
from .doors.mysql_device_repository import MySQLDeviceRepository
from .roster.service import RosterAggregator
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.resolver import ScheduleResolver
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .settings.model import AcademicTerm
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsProvider
from .sweep.leader_lock import LeaderLock, MySQLAdvisoryLock
from .sweep.runner import SweepScheduler
from .sweep.service import NoShowSweep
from .users.mysql_user_repository import MySQLUserDirectory
from .users.repository import UserDirectory


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    users_repo: UserDirectory
    schedules_repo: ScheduleRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    settings_provider: SettingsProvider
    schedule_resolver: ScheduleResolver
    session_service: SessionService
    attendance_service: AttendanceService
    roster_service: RosterAggregator
    sweep: NoShowSweep
    sweep_scheduler: SweepScheduler


def assemble_container(
    *,
    users_repo: UserDirectory,
    schedules_repo: ScheduleRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: Optional[SettingsRepository] = None,
    door_dispatcher: Optional[DoorLockDispatcher] = None,
    sweep_lock: Optional[LeaderLock] = None,
    clock: Optional[Clock] = None,
    conn: Optional[DatabaseConnection] = None,
    early_arrival_minutes: int = DEFAULT_EARLY_ARRIVAL_MINUTES,
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    default_term: AcademicTerm = AcademicTerm(DEFAULT_ACADEMIC_YEAR, DEFAULT_SEMESTER),
    sweep_interval_minutes: int = DEFAULT_SWEEP_INTERVAL_MINUTES,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""

    clock = clock or SystemClock()
    settings_provider = SettingsProvider(
        settings_repo,
        default_term=default_term,
        early_arrival_minutes=early_arrival_minutes,
        late_threshold_minutes=late_threshold_minutes,
    )
    schedule_resolver = ScheduleResolver(schedules_repo, sessions_repo, users_repo)
    session_service = SessionService(sessions_repo, attendance_repo)
    attendance_service = AttendanceService(
        attendance=attendance_repo,
        users=users_repo,
        resolver=schedule_resolver,
        sessions=session_service,
        settings=settings_provider,
        store=AttendanceStore(attendance_repo),
        doors=door_dispatcher or NullDoorLockDispatcher(),
        clock=clock,
        strategy_factory=ScanStrategyFactory(),
    )
    roster_service = RosterAggregator(
        users=users_repo,
        attendance=attendance_repo,
        sessions=sessions_repo,
        resolver=schedule_resolver,
    )
    sweep = NoShowSweep(
        schedules=schedules_repo,
        sessions=sessions_repo,
        attendance=attendance_repo,
        settings=settings_provider,
        clock=clock,
    )
    sweep_scheduler = SweepScheduler(sweep, lock=sweep_lock, interval_minutes=sweep_interval_minutes)

    return Container(
        conn=conn,
        clock=clock,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        settings_provider=settings_provider,
        schedule_resolver=schedule_resolver,
        session_service=session_service,
        attendance_service=attendance_service,
        roster_service=roster_service,
        sweep=sweep,
        sweep_scheduler=sweep_scheduler,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    def opt(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    if opt("DOOR_LOCK_ENABLED", False):
        doors: DoorLockDispatcher = HttpDoorLockDispatcher(
            MySQLDeviceRepository(conn),
            timeout=opt("DOOR_LOCK_TIMEOUT_SECONDS", DEFAULT_DOOR_LOCK_TIMEOUT_SECONDS),
        )
    else:
        doors = NullDoorLockDispatcher()

    return assemble_container(
        conn=conn,
        users_repo=MySQLUserDirectory(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        door_dispatcher=doors,
        sweep_lock=MySQLAdvisoryLock(conn),
        early_arrival_minutes=int(opt("EARLY_ARRIVAL_WINDOW_MINUTES", DEFAULT_EARLY_ARRIVAL_MINUTES)),
        late_threshold_minutes=int(opt("LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
        default_term=AcademicTerm(
            opt("DEFAULT_ACADEMIC_YEAR", DEFAULT_ACADEMIC_YEAR),
            opt("DEFAULT_SEMESTER", DEFAULT_SEMESTER),
        ),
        sweep_interval_minutes=int(opt("SWEEP_INTERVAL_MINUTES", DEFAULT_SWEEP_INTERVAL_MINUTES)),
    )
