from __future__ import annotations

from datetime import date, time

import pytest

from classroom_attendance.core.constants import ADMIN_SUBJECT_CODE, DEFAULT_CLASS_END, DEFAULT_CLASS_START, WEEKDAYS
from classroom_attendance.core.exceptions import NotFoundError
from classroom_attendance.schedules.resolver import covers
from classroom_attendance.schedules.session_key import SessionKey
from tests.fakes import MONDAY, TERM, at


def _resolve(campus, who, when, **kwargs):
    container = campus.container
    return container.schedule_resolver.resolve(
        user=campus.people[who],
        room_id=kwargs.pop("room_id", 1),
        at=when,
        settings=container.settings_provider.current(),
        **kwargs,
    )


def _admin_rows(campus):
    return [s for s in campus.schedules.schedules.values() if s.subject_code == ADMIN_SUBJECT_CODE]


def test_covers_includes_both_ends(campus):
    assert covers(campus.cs101, at(8, 0))
    assert covers(campus.cs101, at(9, 0, 59))
    assert not covers(campus.cs101, at(9, 1))
    assert not covers(campus.cs101, at(7, 50))
    assert covers(campus.cs101, at(7, 50), lead_minutes=10)


def test_student_resolves_to_enrolled_class(campus):
    assert _resolve(campus, "ana", at(8, 20)) == campus.cs101


def test_student_resolves_within_early_window(campus):
    assert _resolve(campus, "ana", at(7, 45)) == campus.cs101
    with pytest.raises(NotFoundError):
        _resolve(campus, "ana", at(7, 44))


def test_student_prefers_enrolled_class_when_two_overlap(campus):
    campus.schedules.add_subject(11, "MA101", "Calculus")
    calculus = campus.schedules.add_schedule(11, 1, "Monday", time(8, 30), time(9, 30))
    campus.users.enroll(7, 11)

    assert _resolve(campus, "gia", at(8, 40)) == calculus
    assert _resolve(campus, "ana", at(8, 40)) == campus.cs101


def test_active_session_wins_for_students(campus):
    campus.schedules.add_subject(11, "MA101", "Calculus")
    calculus = campus.schedules.add_schedule(11, 1, "Monday", time(8, 30), time(9, 30))
    campus.container.session_service.start(calculus, instructor_id=2, at=at(8, 25))

    assert _resolve(campus, "ana", at(8, 40)) == calculus


def test_instructor_resolves_to_taught_class(campus):
    assert _resolve(campus, "ben", at(7, 50)) == campus.cs101


def test_instructor_without_class_is_not_found(campus):
    with pytest.raises(NotFoundError):
        _resolve(campus, "ben", at(13, 0))


def test_custodian_gets_administrative_schedule_for_the_weekday(campus):
    schedule = _resolve(campus, "carl", at(6, 0, on=date(2025, 1, 8)))

    assert schedule.is_administrative
    assert schedule.day_of_week == "Wednesday"
    assert (schedule.start_time, schedule.end_time) == (time(0, 0), time(23, 59))


def test_administrative_schedules_are_created_once(campus):
    resolver = campus.container.schedule_resolver
    resolver.administrative(1, TERM, "Monday")
    first = {s.schedule_id for s in _admin_rows(campus)}
    resolver.administrative(1, TERM, "Tuesday")

    assert sorted(s.day_of_week for s in _admin_rows(campus)) == sorted(WEEKDAYS)
    assert {s.schedule_id for s in _admin_rows(campus)} == first


def test_weekend_scan_falls_back_to_monday_administrative_schedule(campus):
    schedule = _resolve(campus, "carl", at(10, 0, on=date(2025, 1, 11)))
    assert schedule.is_administrative
    assert schedule.day_of_week == "Monday"


def test_dean_teaching_now_gets_the_class(campus):
    campus.schedules.add_subject(12, "MGT1", "Management", instructor_id=4)
    mgt = campus.schedules.add_schedule(12, 1, "Monday", time(10, 0), time(11, 0))

    assert _resolve(campus, "dina", at(10, 5)) == mgt
    assert _resolve(campus, "dina", at(9, 55)).is_administrative


def test_explicit_subject_creates_default_schedule_once(campus):
    campus.schedules.add_subject(11, "MA101", "Calculus")

    first = _resolve(campus, "ben", at(13, 0), subject_id=11)
    second = _resolve(campus, "ben", at(14, 0), subject_id=11)

    assert first == second
    assert (first.start_time, first.end_time) == (DEFAULT_CLASS_START, DEFAULT_CLASS_END)
    assert first.day_of_week == "Monday"


def test_explicit_subject_reuses_existing_schedule(campus):
    assert _resolve(campus, "ana", at(13, 0), subject_id=10) == campus.cs101


def test_unknown_subject_and_room(campus):
    with pytest.raises(NotFoundError):
        _resolve(campus, "ben", at(8, 0), subject_id=999)
    with pytest.raises(NotFoundError):
        _resolve(campus, "ben", at(8, 0), room_id=42)


def test_next_upcoming_skips_started_classes(campus):
    resolver = campus.container.schedule_resolver
    campus.schedules.add_subject(11, "MA101", "Calculus")
    calculus = campus.schedules.add_schedule(11, 1, "Monday", time(13, 0), time(14, 0))

    assert resolver.next_upcoming(room_id=1, at=at(7, 0), term=TERM) == campus.cs101
    assert resolver.next_upcoming(room_id=1, at=at(8, 0), term=TERM) == calculus
    assert resolver.next_upcoming(room_id=1, at=at(13, 30), term=TERM) is None


def test_session_key_prefers_the_schedule_that_met(campus):
    resolver = campus.container.schedule_resolver
    campus.schedules.add_subject(11, "MA101", "Calculus")
    calculus = campus.schedules.add_schedule(11, 1, "Monday", time(8, 0), time(9, 30), term=TERM)
    campus.container.session_service.start(calculus, instructor_id=None, at=at(8, 0))

    schedule, session = resolver.for_session_key(SessionKey(MONDAY, "101", time(8, 0)))
    assert schedule == calculus
    assert session is not None and session.schedule_id == calculus.schedule_id


def test_session_key_without_session_matches_weekday(campus):
    schedule, session = campus.container.schedule_resolver.for_session_key(SessionKey(MONDAY, "101", time(8, 0)))
    assert schedule == campus.cs101
    assert session is None


def test_session_key_with_no_matching_schedule(campus):
    resolver = campus.container.schedule_resolver
    with pytest.raises(NotFoundError):
        resolver.for_session_key(SessionKey(MONDAY, "101", time(15, 0)))
    with pytest.raises(NotFoundError):
        resolver.for_session_key(SessionKey(date(2025, 1, 7), "101", time(8, 0)))
