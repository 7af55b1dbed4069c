from __future__ import annotations

from typing import Dict, Iterable

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_values(self, keys: Iterable[str]) -> Dict[str, str]:
        keys = list(keys)
        if not keys:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT setting_key, setting_value FROM system_settings WHERE setting_key IN ({in_clause(keys)})",
                tuple(keys),
            )
            return {r["setting_key"]: str(r["setting_value"]) for r in fetchall(cur)}
