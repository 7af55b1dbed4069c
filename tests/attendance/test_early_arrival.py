from __future__ import annotations

from datetime import time

import pytest

from classroom_attendance.core.enums import AttendanceStatus, AuthMethod, ScanType
from classroom_attendance.core.exceptions import ConflictError, ForbiddenError, NotFoundError, TooEarlyError
from tests.fakes import at


def _early(campus, rfid, room_id=1):
    return campus.container.attendance_service.early_arrival_scan(
        auth_method=AuthMethod.RFID, identifier=rfid, room_id=room_id
    )


def test_early_arrival_inside_window(campus):
    campus.clock.set(at(7, 50))
    result = _early(campus, "RF-STU-1")

    assert result.status == AttendanceStatus.AWAITING_CONFIRMATION
    assert result.subject_code == "CS101"
    assert (result.class_start, result.class_end) == (time(8, 0), time(9, 0))
    stored = campus.attendance.records[result.attendance_id]
    assert stored.scan_type == ScanType.EARLY_ARRIVAL


def test_early_arrival_before_window_is_too_early(campus):
    campus.clock.set(at(7, 44))
    with pytest.raises(TooEarlyError):
        _early(campus, "RF-STU-1")
    assert campus.attendance.records == {}


def test_early_arrival_uses_stored_window_setting(campus):
    campus.settings.values["student_early_arrival_window"] = "30"
    campus.clock.set(at(7, 35))
    assert _early(campus, "RF-STU-1").status == AttendanceStatus.AWAITING_CONFIRMATION


def test_early_arrival_is_students_only(campus):
    campus.clock.set(at(7, 50))
    with pytest.raises(ForbiddenError):
        _early(campus, "RF-INS-2")


def test_early_arrival_without_upcoming_class(campus):
    campus.clock.set(at(8, 30))
    with pytest.raises(NotFoundError):
        _early(campus, "RF-STU-1")


def test_early_arrival_requires_enrollment(campus):
    campus.clock.set(at(7, 50))
    with pytest.raises(ForbiddenError):
        _early(campus, "RF-STU-7")


def test_early_arrival_twice_conflicts(campus):
    campus.clock.set(at(7, 50))
    _early(campus, "RF-STU-1")
    campus.clock.set(at(7, 52))
    with pytest.raises(ConflictError):
        _early(campus, "RF-STU-1")


def test_early_arrival_picks_the_next_class(campus):
    campus.schedules.add_subject(11, "CS102", "Data Structures", instructor_id=2)
    campus.schedules.add_schedule(11, 1, "Monday", time(10, 0), time(11, 0))
    campus.users.enroll(1, 11)

    campus.clock.set(at(9, 50))
    assert _early(campus, "RF-STU-1").subject_code == "CS102"
