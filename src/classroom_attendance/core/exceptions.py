from __future__ import annotations

from typing import Optional

from .enums import AttendanceStatus


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Unknown identifier, schedule, room or malformed session key."""


class ForbiddenError(DomainError):
    """Inactive user, wrong role for the endpoint or not enrolled."""


class ConflictError(DomainError):
    """A primary attendance record already exists for the same day."""

    def __init__(self, message: str, *, existing_status: Optional[AttendanceStatus] = None):
        super().__init__(message)
        self.existing_status = existing_status


class TooEarlyError(DomainError):
    """Early-arrival scan before the configured window opens."""


class UpstreamError(DomainError):
    """A collaborator (door lock controller) failed. Never surfaced to scanners."""


class DuplicateRecordError(Exception):
    """Raised by repositories when a unique constraint rejects an insert."""
