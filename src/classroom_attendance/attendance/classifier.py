"""Attendance status classification.

Pure functions of the scan time, the schedule window, the configured
early-arrival and late thresholds and the record (if any) already stored for
the same user, schedule and day. Nothing here touches storage or the clock.

Windows, with S = class start, E = early-arrival minutes, L = late threshold:

    [S - E, S)      Awaiting Confirmation (students), Present (staff)
    [S, S + L)      Present
    [S + L, ...)    Late

All comparisons are done on wall-clock minutes, so 08:15:59 counts as 08:15.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import floor_to_minute
from ..core.enums import Location, Role
from .factory import ScanStrategyFactory
from .model import AttendanceRecord, ClassificationPolicy, ScheduleWindow
from .strategies.base import ScanFacts, StatusDecision

_default_factory = ScanStrategyFactory()


def classify_scan(
    *,
    role: Role,
    scan_time: datetime,
    window: ScheduleWindow,
    policy: ClassificationPolicy,
    existing: Optional[AttendanceRecord] = None,
    session_active: bool = False,
    location: Location = Location.INSIDE,
    early_entry: bool = False,
    factory: Optional[ScanStrategyFactory] = None,
) -> StatusDecision:
    """Decide status and scan type for a primary (time-in family) scan.

    ``early_entry`` marks the dedicated early-arrival entry point, which
    refuses scans before the window opens with ``TooEarlyError``.
    """

    facts = ScanFacts(
        role=role,
        scan_time=floor_to_minute(scan_time),
        window=window,
        policy=policy,
        existing=existing,
        session_active=session_active,
        location=location,
        early_entry=early_entry,
    )
    strategy = (factory or _default_factory).for_scan(facts)
    return strategy.decide(facts)
