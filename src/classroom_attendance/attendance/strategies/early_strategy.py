from __future__ import annotations

from ...core.enums import AttendanceStatus, Role, ScanType
from ...core.exceptions import TooEarlyError
from .base import ScanFacts, ScanStrategy, StatusDecision


class EarlyArrivalStrategy(ScanStrategy):
    """Scan before the class starts.

    Students wait in Awaiting Confirmation until the instructor opens the
    session (or the sweep settles it). Staff are simply Present.
    """

    def decide(self, facts: ScanFacts) -> StatusDecision:
        if facts.early_entry and facts.scan_time < facts.opens_at:
            raise TooEarlyError(
                f"Too early: early arrival opens at {facts.opens_at.strftime('%H:%M')}"
            )

        if facts.role != Role.STUDENT:
            return StatusDecision(status=AttendanceStatus.PRESENT, scan_type=ScanType.TIME_IN)

        if facts.session_active:
            # Instructor already in: nothing left to confirm.
            return StatusDecision(status=AttendanceStatus.PRESENT, scan_type=ScanType.EARLY_ARRIVAL_UPGRADED)

        return StatusDecision(status=AttendanceStatus.AWAITING_CONFIRMATION, scan_type=ScanType.EARLY_ARRIVAL)
