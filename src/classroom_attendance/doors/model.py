from __future__ import annotations

from dataclasses import dataclass

LOCK_CONTROLLER = "lock_controller"


@dataclass(frozen=True)
class Device:
    device_id: int
    room_id: int
    device_type: str
    ip_address: str
    port: int = 80

    @property
    def lock_control_url(self) -> str:
        host = self.ip_address if self.port in (80, None) else f"{self.ip_address}:{self.port}"
        return f"http://{host}/api/lock-control"
