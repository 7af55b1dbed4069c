from __future__ import annotations

from ...core.enums import AttendanceStatus, ScanType
from .base import ScanFacts, ScanStrategy, StatusDecision


class LateStrategy(ScanStrategy):
    """At or past start + late threshold."""

    def decide(self, facts: ScanFacts) -> StatusDecision:
        minutes = int((facts.scan_time - facts.window.start).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, scan_type=ScanType.TIME_IN, note=f"{minutes} min late")
