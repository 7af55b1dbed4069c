from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol

import requests

from ..core.constants import DEFAULT_DOOR_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import UpstreamError
from ..schedules.model import Room
from .model import Device
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DoorLockDispatcher(Protocol):
    def open_door(self, room: Room, *, requested_by: str) -> Optional[Future]:
        """Ask the room's lock controller to open. Must not block or raise."""

        raise NotImplementedError


class NullDoorLockDispatcher:
    """Used when door control is disabled."""

    def open_door(self, room: Room, *, requested_by: str) -> Optional[Future]:
        logger.debug("Door control disabled; not opening room %s for %s", room.room_number, requested_by)
        return None


class HttpDoorLockDispatcher:
    """Fire-and-forget ``POST /api/lock-control`` to the room's controllers.

    Requests run on a small thread pool so the scan response never waits on
    hardware. Failures are logged and dropped.
    """

    def __init__(
        self,
        devices: DeviceRepository,
        *,
        timeout: float = DEFAULT_DOOR_LOCK_TIMEOUT_SECONDS,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self._devices = devices
        self._timeout = float(timeout)
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="door-lock")

    def open_door(self, room: Room, *, requested_by: str) -> Optional[Future]:
        return self._executor.submit(self._open_room, room, requested_by)

    def send(self, device: Device, *, action: str, user: str) -> dict:
        try:
            response = requests.post(
                device.lock_control_url,
                json={"action": action, "user": user},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise UpstreamError(f"Lock controller {device.device_id} at {device.ip_address}: {exc}") from exc

        try:
            return response.json() or {}
        except ValueError:
            return {}

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

    def _open_room(self, room: Room, requested_by: str) -> int:
        opened = 0
        try:
            devices = self._devices.list_lock_controllers(room.room_id)
            if not devices:
                logger.info("No lock controller online in room %s", room.room_number)
                return 0
            for device in devices:
                try:
                    self.send(device, action="open", user=requested_by)
                    opened += 1
                    logger.info("Door opened in room %s for %s (device %s)", room.room_number, requested_by, device.device_id)
                except UpstreamError as exc:
                    logger.warning("Door lock dispatch failed: %s", exc)
        except Exception:
            # Runs on a worker thread; nothing upstream is waiting for it.
            logger.exception("Door lock dispatch crashed for room %s", room.room_number)
        return opened
