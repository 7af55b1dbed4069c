from __future__ import annotations

from datetime import date, time

import pytest

from classroom_attendance.core.enums import AttendanceStatus, AuthMethod, Location, ScanType, SessionStatus
from classroom_attendance.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from tests.fakes import MONDAY, at, scan


def test_student_late_scan(campus):
    campus.clock.set(at(8, 20))
    result = scan(campus, "RF-STU-1")

    assert result.status == AttendanceStatus.LATE
    assert result.scan_type == ScanType.TIME_IN
    assert result.subject_code == "CS101"
    assert result.room_number == "101"


def test_student_early_scan_awaits_then_conflicts(campus):
    campus.clock.set(at(7, 58))
    first = scan(campus, "RF-STU-1")
    assert first.status == AttendanceStatus.AWAITING_CONFIRMATION
    assert first.scan_type == ScanType.EARLY_ARRIVAL

    campus.clock.set(at(8, 3))
    with pytest.raises(ConflictError) as exc:
        scan(campus, "RF-STU-1")
    assert exc.value.existing_status == AttendanceStatus.AWAITING_CONFIRMATION


def test_fingerprint_id_maps_to_identifier(campus):
    campus.clock.set(at(8, 5))
    result = campus.container.attendance_service.submit_scan(
        auth_method=AuthMethod.FINGERPRINT, fingerprint_id=7, room_id=1
    )
    assert result.user_id == 1
    assert result.status == AttendanceStatus.PRESENT


def test_unknown_identifier_is_not_found(campus):
    with pytest.raises(NotFoundError):
        scan(campus, "RF-NOBODY")


def test_inactive_user_is_forbidden(campus):
    with pytest.raises(ForbiddenError):
        scan(campus, "RF-STU-6")


def test_missing_identifier_is_invalid(campus):
    with pytest.raises(ValidationError):
        campus.container.attendance_service.submit_scan(auth_method=AuthMethod.RFID, room_id=1)


def test_unknown_room_is_not_found(campus):
    with pytest.raises(NotFoundError):
        scan(campus, "RF-STU-1", room_id=99)


def test_student_not_enrolled_is_forbidden_with_subject(campus):
    campus.clock.set(at(8, 5))
    with pytest.raises(ForbiddenError) as exc:
        scan(campus, "RF-STU-7")
    assert "CS101 - Intro to Programming" in str(exc.value)
    assert campus.attendance.records == {}


def test_student_with_no_class_running_is_not_found(campus):
    campus.clock.set(at(13, 0))
    with pytest.raises(NotFoundError):
        scan(campus, "RF-STU-1")


def test_instructor_scan_starts_session_and_promotes_early_arrivals(campus):
    campus.clock.set(at(7, 58))
    early = scan(campus, "RF-STU-1")

    campus.clock.set(at(7, 59))
    instructor = scan(campus, "RF-INS-2")

    assert instructor.status == AttendanceStatus.PRESENT
    session = campus.sessions.get_for_schedule(campus.cs101.schedule_id, MONDAY)
    assert session is not None and session.status == SessionStatus.ACTIVE
    assert instructor.session_id == session.session_id

    promoted = campus.attendance.records[early.attendance_id]
    assert promoted.status == AttendanceStatus.PRESENT
    assert promoted.scan_type == ScanType.EARLY_ARRIVAL_UPGRADED
    assert promoted.session_id == session.session_id
    assert promoted.scan_time == at(7, 58)


def test_instructor_scan_opens_door(campus):
    campus.clock.set(at(7, 59))
    scan(campus, "RF-INS-2")
    assert campus.doors.opened == [("101", "Ben Cruz")]


def test_student_scan_does_not_open_door(campus):
    campus.clock.set(at(8, 1))
    scan(campus, "RF-STU-1")
    assert campus.doors.opened == []


def test_student_confirms_after_session_started_elsewhere(campus):
    campus.clock.set(at(7, 58))
    early = scan(campus, "RF-STU-1")
    campus.sessions.create(
        schedule_id=campus.cs101.schedule_id, room_id=1, session_date=MONDAY, started_at=at(8, 0), instructor_id=2
    )

    campus.clock.set(at(8, 2))
    confirmed = scan(campus, "RF-STU-1")

    assert confirmed.attendance_id == early.attendance_id
    assert confirmed.status == AttendanceStatus.PRESENT
    assert confirmed.scan_type == ScanType.TIME_IN_CONFIRMATION
    assert confirmed.scan_time == at(7, 58)
    assert len(campus.attendance.records) == 1


def test_outside_scan_after_session_start_is_a_conflict(campus):
    campus.clock.set(at(7, 58))
    scan(campus, "RF-STU-1")
    campus.sessions.create(
        schedule_id=campus.cs101.schedule_id, room_id=1, session_date=MONDAY, started_at=at(8, 0), instructor_id=2
    )

    campus.clock.set(at(8, 2))
    with pytest.raises(ConflictError):
        scan(campus, "RF-STU-1", location=Location.OUTSIDE)


def test_custodian_is_present_at_any_hour(campus):
    for when in (at(6, 0), at(14, 0, on=date(2025, 1, 7)), at(22, 30, on=date(2025, 1, 8))):
        campus.clock.set(when)
        result = scan(campus, "RF-CUS-3")
        assert result.status == AttendanceStatus.PRESENT
        assert result.subject_code == "ADMIN-ACCESS"


def test_dean_without_personal_class_gets_administrative_schedule(campus):
    campus.clock.set(at(14, 0))
    result = scan(campus, "RF-DEAN-4")

    assert result.status == AttendanceStatus.PRESENT
    assert result.subject_code == "ADMIN-ACCESS"
    assert campus.sessions.sessions == {}


def test_dean_with_personal_class_is_classified_normally(campus):
    campus.schedules.add_subject(20, "MGT200", "Leadership", instructor_id=4)
    mgt = campus.schedules.add_schedule(20, 1, "Monday", time(14, 0), time(15, 30))

    campus.clock.set(at(14, 0))
    result = scan(campus, "RF-DEAN-4")

    assert result.subject_code == "MGT200"
    assert result.status == AttendanceStatus.PRESENT
    assert campus.sessions.get_for_schedule(mgt.schedule_id, MONDAY) is not None


def test_explicit_subject_creates_default_schedule(campus):
    campus.schedules.add_subject(30, "MATH1", "Calculus")
    campus.users.enroll(1, 30)

    campus.clock.set(at(8, 10))
    result = scan(campus, "RF-STU-1", subject_id=30)

    assert result.subject_code == "MATH1"
    assert result.status == AttendanceStatus.PRESENT
    created = campus.schedules.list_for_subject_room(subject_id=30, room_id=1, term=campus.cs101.term)
    assert len(created) == 1
    assert (created[0].start_time, created[0].end_time) == (time(8, 0), time(17, 0))


def test_student_time_out_after_class_has_no_schedule(campus):
    campus.clock.set(at(7, 58))
    scan(campus, "RF-STU-1")

    campus.clock.set(at(9, 2))
    out = scan(campus, "RF-STU-1", scan_type=ScanType.TIME_OUT)

    assert out.scan_type == ScanType.TIME_OUT
    assert out.subject_code is None
    assert campus.attendance.records[out.attendance_id].schedule_id is None


def test_instructor_time_out_ends_session(campus):
    campus.clock.set(at(7, 59))
    scan(campus, "RF-INS-2")

    campus.clock.set(at(9, 1))
    scan(campus, "RF-INS-2", scan_type=ScanType.TIME_OUT)

    session = campus.sessions.get_for_schedule(campus.cs101.schedule_id, MONDAY)
    assert session.status == SessionStatus.ENDED
    assert session.ended_at == at(9, 1)


def test_awaiting_stats(campus):
    campus.clock.set(at(7, 55))
    scan(campus, "RF-STU-1")
    scan(campus, "RF-STU-8")

    stats = campus.container.attendance_service.awaiting_stats(MONDAY)
    assert (stats.records, stats.schedules, stats.students) == (2, 1, 2)


def test_submit_before_the_early_window_finds_no_class(campus):
    campus.clock.set(at(7, 44))
    with pytest.raises(NotFoundError):
        scan(campus, "RF-STU-1")
    assert campus.attendance.records == {}

    campus.clock.set(at(7, 45))
    assert scan(campus, "RF-STU-1").status == AttendanceStatus.AWAITING_CONFIRMATION


def test_session_opened_while_student_scan_is_in_flight(campus, monkeypatch):
    original_insert = campus.attendance.insert

    def insert_after_instructor(**kwargs):
        # The instructor's session start, with its promotion pass, lands first.
        campus.container.session_service.start(campus.cs101, instructor_id=2, at=at(7, 57))
        return original_insert(**kwargs)

    monkeypatch.setattr(campus.attendance, "insert", insert_after_instructor)
    campus.clock.set(at(7, 57))
    result = scan(campus, "RF-STU-1")

    stored = campus.attendance.find_primary(1, campus.cs101.schedule_id, MONDAY)
    session = campus.sessions.get_for_schedule(campus.cs101.schedule_id, MONDAY)
    assert stored.status == AttendanceStatus.PRESENT
    assert stored.scan_type == ScanType.EARLY_ARRIVAL_UPGRADED
    assert stored.session_id == session.session_id
    assert result.status == AttendanceStatus.PRESENT
    assert campus.container.sweep.run(now=at(9, 30)).updated == 0


def test_instructor_duplicate_scan_still_opens_door(campus):
    campus.clock.set(at(7, 59))
    scan(campus, "RF-INS-2")
    campus.clock.set(at(8, 10))
    with pytest.raises(ConflictError):
        scan(campus, "RF-INS-2")

    assert campus.doors.opened == [("101", "Ben Cruz"), ("101", "Ben Cruz")]


def test_instructor_without_class_does_not_open_door(campus):
    campus.clock.set(at(13, 0))
    with pytest.raises(NotFoundError):
        scan(campus, "RF-INS-2")
    assert campus.doors.opened == []
