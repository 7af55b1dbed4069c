from __future__ import annotations

from typing import Optional

from ..core.constants import FINGERPRINT_IDENTIFIER_PREFIX
from ..core.enums import AuthMethod, Location, ScanType
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def parse_auth_method(value: Optional[str]) -> AuthMethod:
    try:
        return AuthMethod((value or "").strip().lower())
    except ValueError:
        raise ValidationError("auth_method must be one of: rfid, fingerprint")


def parse_location(value: Optional[str]) -> Location:
    if not value:
        return Location.INSIDE
    try:
        return Location(value.strip().lower())
    except ValueError:
        raise ValidationError("location must be inside or outside")


def parse_scan_type(value: Optional[str]) -> ScanType:
    if not value:
        return ScanType.TIME_IN
    v = value.strip().lower()
    if v not in {ScanType.TIME_IN.value, ScanType.TIME_OUT.value}:
        raise ValidationError("scan_type must be time_in or time_out")
    return ScanType(v)


def fingerprint_identifier(fingerprint_id: int) -> str:
    fid = int(fingerprint_id)
    if fid <= 0:
        raise ValidationError("fingerprint_id must be positive")
    return f"{FINGERPRINT_IDENTIFIER_PREFIX}{fid}"
