from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a person who can scan at a door device.

    Owned by the user-management side; read-only for attendance.
    """

    user_id: int
    full_name: str
    role: Role
    is_active: bool = True
