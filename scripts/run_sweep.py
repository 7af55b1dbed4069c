"""Run the no-show sweep once (for cron-driven deployments with SWEEP_ENABLED=0)."""

from __future__ import annotations

import importlib

from config import get_settings_module

from classroom_attendance.container import build_container
from classroom_attendance.main import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    result = container.sweep_scheduler.run_once()
    if result is None:
        raise SystemExit("Sweep skipped: another worker holds the lock, or the run failed (see log)")
    print(f"OK: {result.on_date} updated={result.updated} schedules={result.schedule_ids}")


if __name__ == "__main__":
    main()
