from __future__ import annotations

from ...core.enums import AttendanceStatus, ScanType
from .base import ScanAction, ScanFacts, ScanStrategy, StatusDecision


class ConfirmationStrategy(ScanStrategy):
    """Second scan of an early student once the session is running."""

    def decide(self, facts: ScanFacts) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.PRESENT,
            scan_type=ScanType.TIME_IN_CONFIRMATION,
            action=ScanAction.CONFIRM,
        )
