from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from ..core.constants import SWEEP_LOCK_NAME
from ..database.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class LeaderLock(Protocol):
    def held(self) -> Iterator[bool]:
        """Context manager yielding True when this process may run the job."""

        raise NotImplementedError


class LocalLeaderLock:
    """Single-process guard (tests, single worker deployments)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @contextmanager
    def held(self) -> Iterator[bool]:
        acquired = self._lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()


class MySQLAdvisoryLock:
    """Deployment-wide guard using ``GET_LOCK``.

    MySQL named locks belong to a connection, so the lock keeps its own
    connection open for the duration of the run.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, name: str = SWEEP_LOCK_NAME, wait_seconds: int = 0):
        self._conn_factory = conn_factory
        self._name = name
        self._wait = int(wait_seconds)

    @contextmanager
    def held(self) -> Iterator[bool]:
        conn = self._conn_factory.connect()
        acquired = False
        try:
            cur = conn.cursor()
            try:
                cur.execute("SELECT GET_LOCK(%s, %s)", (self._name, self._wait))
                row = cur.fetchone()
                acquired = bool(row and row[0] == 1)
                if not acquired:
                    logger.debug("Lock %s held elsewhere", self._name)
                yield acquired
            finally:
                if acquired:
                    cur.execute("SELECT RELEASE_LOCK(%s)", (self._name,))
                    cur.fetchone()
                cur.close()
        finally:
            conn.close()
