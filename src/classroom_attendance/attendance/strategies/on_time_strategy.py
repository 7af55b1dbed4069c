from __future__ import annotations

from ...core.enums import AttendanceStatus, ScanType
from .base import ScanFacts, ScanStrategy, StatusDecision


class OnTimeStrategy(ScanStrategy):
    """From class start up to the late threshold."""

    def decide(self, facts: ScanFacts) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, scan_type=ScanType.TIME_IN)
