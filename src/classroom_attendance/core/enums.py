from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles known to the scan endpoints."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"
    CUSTODIAN = "custodian"
    DEAN = "dean"


class AttendanceStatus(str, Enum):
    """Status strings stored in (or reported from) attendance_records."""

    PRESENT = "Present"
    LATE = "Late"
    EARLY_ARRIVAL = "Early Arrival"
    AWAITING_CONFIRMATION = "Awaiting Confirmation"
    ABSENT = "Absent"


class ScanType(str, Enum):
    TIME_IN = "time_in"
    TIME_OUT = "time_out"
    EARLY_ARRIVAL = "early_arrival"
    TIME_IN_CONFIRMATION = "time_in_confirmation"
    EARLY_ARRIVAL_UPGRADED = "early_arrival_upgraded"

    @property
    def is_primary(self) -> bool:
        return self is not ScanType.TIME_OUT

    @property
    def is_early(self) -> bool:
        return self in {ScanType.EARLY_ARRIVAL, ScanType.EARLY_ARRIVAL_UPGRADED, ScanType.TIME_IN_CONFIRMATION}


class AuthMethod(str, Enum):
    RFID = "rfid"
    FINGERPRINT = "fingerprint"


class Location(str, Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"

