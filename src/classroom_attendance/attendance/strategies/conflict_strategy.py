from __future__ import annotations

from .base import ScanAction, ScanFacts, ScanStrategy, StatusDecision


class ConflictStrategy(ScanStrategy):
    """A primary record already exists; keep it untouched."""

    def decide(self, facts: ScanFacts) -> StatusDecision:
        existing = facts.existing
        return StatusDecision(
            status=existing.status,
            scan_type=existing.scan_type,
            action=ScanAction.CONFLICT,
            note=f"already recorded at {existing.scan_time.strftime('%H:%M')}",
        )
