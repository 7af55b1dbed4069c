from __future__ import annotations

import threading

import pytest

from classroom_attendance.attendance.model import ScanDraft
from classroom_attendance.attendance.store import AttendanceStore
from classroom_attendance.attendance.strategies.base import ScanAction, StatusDecision
from classroom_attendance.core.enums import AttendanceStatus, AuthMethod, Location, ScanType
from classroom_attendance.core.exceptions import ConflictError, DuplicateRecordError
from tests.fakes import TERM, InMemoryAttendance, at


def _draft(when, *, user_id=1, schedule_id=1, session_id=None):
    return ScanDraft(
        user_id=user_id,
        schedule_id=schedule_id,
        scan_time=when,
        auth_method=AuthMethod.RFID,
        location=Location.INSIDE,
        term=TERM,
        session_id=session_id,
    )


def _create(status=AttendanceStatus.PRESENT, scan_type=ScanType.TIME_IN):
    def decide(existing):
        if existing is not None:
            return StatusDecision(existing.status, existing.scan_type, ScanAction.CONFLICT)
        return StatusDecision(status, scan_type)

    return decide


def test_second_primary_scan_conflicts_with_existing_status():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    store.record_primary(_draft(at(7, 58)), _create(AttendanceStatus.AWAITING_CONFIRMATION, ScanType.EARLY_ARRIVAL))

    with pytest.raises(ConflictError) as exc:
        store.record_primary(_draft(at(8, 3)), _create())

    assert exc.value.existing_status == AttendanceStatus.AWAITING_CONFIRMATION
    assert len(repo.records) == 1


def test_same_user_other_schedule_is_not_a_conflict():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    store.record_primary(_draft(at(8, 0), schedule_id=1), _create())
    store.record_primary(_draft(at(10, 0), schedule_id=2), _create())
    assert len(repo.records) == 2


class _PhantomDuplicate(InMemoryAttendance):
    """First insert fails with a duplicate key although nothing was stored."""

    def __init__(self):
        super().__init__()
        self.failures = 1

    def insert(self, **kwargs):
        if self.failures:
            self.failures -= 1
            raise DuplicateRecordError("uq_primary_slot")
        return super().insert(**kwargs)


class _RacingDevice(InMemoryAttendance):
    """Another device stores a Present row between our read and our insert."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def insert(self, **kwargs):
        if not self.raced and kwargs["scan_type"].is_primary:
            self.raced = True
            super().insert(**dict(kwargs, status=AttendanceStatus.PRESENT, scan_type=ScanType.TIME_IN))
            raise DuplicateRecordError("uq_primary_slot")
        return super().insert(**kwargs)


def test_duplicate_key_is_retried_once_transparently():
    repo = _PhantomDuplicate()
    record = AttendanceStore(repo).record_primary(_draft(at(8, 1)), _create())
    assert record.status == AttendanceStatus.PRESENT
    assert len(repo.records) == 1


def test_lost_race_surfaces_as_conflict():
    repo = _RacingDevice()
    with pytest.raises(ConflictError) as exc:
        AttendanceStore(repo).record_primary(_draft(at(8, 1)), _create(AttendanceStatus.LATE))
    assert exc.value.existing_status == AttendanceStatus.PRESENT
    assert len(repo.records) == 1


def test_concurrent_scans_create_one_primary_record():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    outcomes = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        try:
            store.record_primary(_draft(at(8, 1)), _create())
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    assert len(repo.records) == 1


def test_confirm_keeps_original_scan_time():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    first = store.record_primary(
        _draft(at(7, 58)), _create(AttendanceStatus.AWAITING_CONFIRMATION, ScanType.EARLY_ARRIVAL)
    )

    confirm = lambda existing: StatusDecision(
        AttendanceStatus.PRESENT, ScanType.TIME_IN_CONFIRMATION, ScanAction.CONFIRM
    )
    record = store.record_primary(_draft(at(8, 4), session_id=9), confirm)

    assert record.attendance_id == first.attendance_id
    assert record.scan_time == at(7, 58)
    assert record.session_id == 9
    stored = repo.records[first.attendance_id]
    assert stored.status == AttendanceStatus.PRESENT
    assert stored.scan_type == ScanType.TIME_IN_CONFIRMATION


def test_time_out_is_additive_and_borrows_status():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    store.record_primary(_draft(at(8, 20)), _create(AttendanceStatus.LATE))

    first = store.record_time_out(_draft(at(8, 50)))
    second = store.record_time_out(_draft(at(8, 55)))

    assert first.scan_type == ScanType.TIME_OUT
    assert first.status == AttendanceStatus.LATE
    assert second.attendance_id != first.attendance_id
    assert len(repo.records) == 3


def test_unassigned_time_out_falls_back_to_any_schedule():
    repo = InMemoryAttendance()
    store = AttendanceStore(repo)
    store.record_primary(
        _draft(at(7, 58), session_id=4), _create(AttendanceStatus.AWAITING_CONFIRMATION, ScanType.EARLY_ARRIVAL)
    )

    out = store.record_time_out(_draft(at(9, 2), schedule_id=None))

    assert out.schedule_id is None
    assert out.status == AttendanceStatus.AWAITING_CONFIRMATION
    assert out.session_id == 4


def test_time_out_without_any_time_in_defaults_to_present():
    out = AttendanceStore(InMemoryAttendance()).record_time_out(_draft(at(12, 0), schedule_id=None))
    assert out.status == AttendanceStatus.PRESENT
