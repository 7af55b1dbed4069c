from __future__ import annotations

import pytest

from classroom_attendance.attendance.model import AttendanceRecord
from classroom_attendance.core.enums import AttendanceStatus, AuthMethod, Location, Role, ScanType
from classroom_attendance.core.exceptions import NotFoundError
from classroom_attendance.roster.model import RosterRow
from classroom_attendance.roster.service import aggregate_user, display_status, summarize
from classroom_attendance.users.model import User
from tests.fakes import MONDAY, TERM, at, scan


def _record(attendance_id, scan_type, when, *, schedule_id=1, status=AttendanceStatus.PRESENT, user_id=1):
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        schedule_id=schedule_id,
        session_id=None,
        scan_type=scan_type,
        scan_time=when,
        record_date=when.date(),
        status=status,
        auth_method=AuthMethod.RFID,
        location=Location.INSIDE,
        academic_year=TERM.academic_year,
        semester=TERM.semester,
    )


ANA = User(1, "Ana Reyes", Role.STUDENT)


def test_display_status():
    assert display_status(None) == AttendanceStatus.ABSENT
    awaiting = _record(1, ScanType.EARLY_ARRIVAL, at(7, 50), status=AttendanceStatus.AWAITING_CONFIRMATION)
    assert display_status(awaiting) == AttendanceStatus.EARLY_ARRIVAL
    upgraded = _record(1, ScanType.EARLY_ARRIVAL_UPGRADED, at(7, 50))
    assert display_status(upgraded) == AttendanceStatus.PRESENT
    late = _record(1, ScanType.TIME_IN, at(8, 20), status=AttendanceStatus.LATE)
    assert display_status(late) == AttendanceStatus.LATE


def test_sign_in_and_sign_out_of_a_confirmed_student():
    records = [
        _record(1, ScanType.TIME_IN_CONFIRMATION, at(8, 2)),
        _record(2, ScanType.TIME_OUT, at(9, 1)),
    ]
    row = aggregate_user(ANA, 1, records)
    assert row.sign_in == at(8, 2)
    assert row.sign_out == at(9, 1)
    assert row.status == AttendanceStatus.PRESENT


def test_unassigned_time_out_follows_last_sign_in():
    records = [
        _record(1, ScanType.TIME_IN, at(8, 0), schedule_id=1),
        _record(2, ScanType.TIME_IN, at(10, 0), schedule_id=2),
        _record(3, ScanType.TIME_OUT, at(9, 30), schedule_id=None),
        _record(4, ScanType.TIME_OUT, at(11, 30), schedule_id=None),
    ]

    first = aggregate_user(ANA, 1, records)
    second = aggregate_user(ANA, 2, records)

    assert (first.sign_in, first.sign_out) == (at(8, 0), at(9, 30))
    assert (second.sign_in, second.sign_out) == (at(10, 0), at(11, 30))


def test_other_users_records_are_ignored():
    row = aggregate_user(ANA, 1, [_record(1, ScanType.TIME_IN, at(8, 0), user_id=99)])
    assert row.status == AttendanceStatus.ABSENT
    assert row.sign_in is None and row.sign_out is None


def test_summarize_counts_early_arrival_as_present():
    rows = [
        RosterRow(1, "A", Role.STUDENT, AttendanceStatus.PRESENT),
        RosterRow(2, "B", Role.STUDENT, AttendanceStatus.EARLY_ARRIVAL),
        RosterRow(3, "C", Role.STUDENT, AttendanceStatus.LATE),
        RosterRow(4, "D", Role.STUDENT, AttendanceStatus.ABSENT),
        RosterRow(5, "E", Role.STUDENT, AttendanceStatus.AWAITING_CONFIRMATION),
    ]
    stats = summarize(rows)
    assert (stats.present, stats.late, stats.absent, stats.total) == (2, 1, 1, 5)


def test_roster_of_a_full_class_day(campus):
    campus.clock.set(at(7, 50))
    campus.container.attendance_service.early_arrival_scan(
        auth_method=AuthMethod.RFID, identifier="RF-STU-1", room_id=1
    )
    campus.clock.set(at(7, 58))
    scan(campus, "RF-INS-2")
    campus.clock.set(at(9, 0))
    scan(campus, "RF-INS-2", scan_type=ScanType.TIME_OUT)
    campus.clock.set(at(10, 30))
    scan(campus, "RF-STU-1", scan_type=ScanType.TIME_OUT)

    roster = campus.container.roster_service.build(campus.cs101, MONDAY)

    assert [r.full_name for r in roster.rows] == ["Ana Reyes", "Hal Vega"]
    ana, hal = roster.rows
    assert ana.status == AttendanceStatus.PRESENT
    assert (ana.sign_in, ana.sign_out) == (at(7, 50), at(10, 30))
    assert hal.status == AttendanceStatus.ABSENT
    assert (roster.stats.present, roster.stats.late, roster.stats.absent, roster.stats.total) == (1, 0, 1, 2)

    assert roster.instructor.full_name == "Ben Cruz"
    assert (roster.instructor.sign_in, roster.instructor.sign_out) == (at(7, 58), at(9, 0))
    assert roster.session is not None and not roster.session.is_active


def test_roster_shows_unconfirmed_early_arrival(campus):
    campus.clock.set(at(7, 50))
    campus.container.attendance_service.early_arrival_scan(
        auth_method=AuthMethod.RFID, identifier="RF-STU-1", room_id=1
    )

    roster = campus.container.roster_service.build(campus.cs101, MONDAY)

    assert roster.rows[0].status == AttendanceStatus.EARLY_ARRIVAL
    assert roster.stats.present == 1
    assert roster.session is None
    assert roster.instructor.status == AttendanceStatus.ABSENT


def test_roster_by_session_key(campus):
    campus.clock.set(at(8, 20))
    scan(campus, "RF-STU-8")

    roster = campus.container.roster_service.for_session_key("2025-01-06-101-08:00")

    assert roster.schedule == campus.cs101
    assert {r.full_name: r.status for r in roster.rows}["Hal Vega"] == AttendanceStatus.LATE


def test_roster_ignores_other_days(campus):
    campus.clock.set(at(8, 5))
    scan(campus, "RF-STU-1")

    roster = campus.container.roster_service.for_session_key("2025-01-13-101-08:00")
    assert roster.stats.absent == 2


def test_roster_with_malformed_key(campus):
    with pytest.raises(NotFoundError):
        campus.container.roster_service.for_session_key("101-08:00")


def test_early_arrival_with_unassigned_time_out(campus):
    campus.clock.set(at(7, 58))
    campus.container.attendance_service.early_arrival_scan(
        auth_method=AuthMethod.RFID, identifier="RF-STU-1", room_id=1
    )
    campus.clock.set(at(10, 30))
    out = scan(campus, "RF-STU-1", scan_type=ScanType.TIME_OUT)
    assert campus.attendance.records[out.attendance_id].schedule_id is None

    row = campus.container.roster_service.build(campus.cs101, MONDAY).rows[0]

    assert row.full_name == "Ana Reyes"
    assert row.status == AttendanceStatus.EARLY_ARRIVAL
    assert (row.sign_in, row.sign_out) == (at(7, 58), at(10, 30))
