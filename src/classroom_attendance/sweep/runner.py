from __future__ import annotations

import atexit
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import DEFAULT_SWEEP_INTERVAL_MINUTES
from .leader_lock import LeaderLock, LocalLeaderLock
from .service import NoShowSweep, SweepResult

logger = logging.getLogger(__name__)

JOB_ID = "no_show_sweep"


class SweepScheduler:
    """Runs the sweep on an interval; one run at a time per deployment."""

    def __init__(
        self,
        sweep: NoShowSweep,
        *,
        lock: Optional[LeaderLock] = None,
        interval_minutes: int = DEFAULT_SWEEP_INTERVAL_MINUTES,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._sweep = sweep
        self._lock = lock or LocalLeaderLock()
        self._interval = int(interval_minutes)
        self._scheduler = scheduler or BackgroundScheduler(job_defaults={"coalesce": True})

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def run_once(self) -> Optional[SweepResult]:
        """One guarded run. None when skipped (lock busy) or failed."""

        with self._lock.held() as acquired:
            if not acquired:
                logger.debug("Sweep skipped: another worker holds the lock")
                return None
            try:
                return self._sweep.run()
            except Exception:
                # Retried on the next interval.
                logger.exception("No-show sweep failed")
                return None

    def start(self) -> None:
        if self.running:
            return
        self._scheduler.add_job(
            func=self.run_once,
            trigger="interval",
            minutes=self._interval,
            id=JOB_ID,
            name="Settle awaiting early arrivals",
            max_instances=1,
            replace_existing=True,
        )
        self._scheduler.start()
        atexit.register(self.shutdown)
        logger.info("No-show sweep scheduled every %d min", self._interval)

    def shutdown(self) -> None:
        if self.running:
            self._scheduler.shutdown(wait=False)
