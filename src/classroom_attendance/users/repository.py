from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AuthMethod
from ..settings.model import AcademicTerm
from .model import User


class UserDirectory(Protocol):
    """Read-only view of users, their credentials and enrollments.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_credential(self, method: AuthMethod, identifier: str) -> Optional[User]:
        raise NotImplementedError

    def is_enrolled(self, user_id: int, subject_id: int, term: AcademicTerm) -> bool:
        raise NotImplementedError

    def list_enrolled(self, subject_id: int, term: AcademicTerm) -> Sequence[User]:
        raise NotImplementedError
