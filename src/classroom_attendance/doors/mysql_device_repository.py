from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LOCK_CONTROLLER, Device
from .repository import DeviceRepository


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_lock_controllers(self, room_id: int) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT device_id, room_id, device_type, ip_address, port
                FROM devices
                WHERE room_id=%s AND device_type=%s AND status='online'
                ORDER BY last_seen DESC
                """,
                (int(room_id), LOCK_CONTROLLER),
            )
            return [
                Device(
                    device_id=int(r["device_id"]),
                    room_id=int(r["room_id"]),
                    device_type=r["device_type"],
                    ip_address=r["ip_address"],
                    port=int(r.get("port") or 80),
                )
                for r in fetchall(cur)
            ]
