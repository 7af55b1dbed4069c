from __future__ import annotations

from typing import Protocol, Sequence

from .model import Device


class DeviceRepository(Protocol):
    def list_lock_controllers(self, room_id: int) -> Sequence[Device]:
        """Online lock controllers of a room, most recently seen first."""

        raise NotImplementedError
