from __future__ import annotations

from ...core.enums import AttendanceStatus, ScanType
from .base import ScanFacts, ScanStrategy, StatusDecision


class AdministrativeStrategy(ScanStrategy):
    """Door-access schedules: always Present, whatever the time."""

    def decide(self, facts: ScanFacts) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, scan_type=ScanType.TIME_IN, note="administrative access")
