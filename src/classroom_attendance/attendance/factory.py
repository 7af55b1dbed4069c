from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus, Location, Role
from .strategies.administrative_strategy import AdministrativeStrategy
from .strategies.base import ScanFacts, ScanStrategy
from .strategies.confirmation_strategy import ConfirmationStrategy
from .strategies.conflict_strategy import ConflictStrategy
from .strategies.early_strategy import EarlyArrivalStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class ScanStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_scan(self, facts: ScanFacts) -> ScanStrategy:
        if facts.existing is not None:
            if self._can_confirm(facts):
                return ConfirmationStrategy()
            return ConflictStrategy()

        if facts.window.administrative:
            return AdministrativeStrategy()
        if facts.scan_time < facts.window.start:
            return EarlyArrivalStrategy()
        if facts.scan_time < facts.late_from:
            return OnTimeStrategy()
        return LateStrategy()

    @staticmethod
    def _can_confirm(facts: ScanFacts) -> bool:
        return (
            facts.role == Role.STUDENT
            and facts.existing.status == AttendanceStatus.AWAITING_CONFIRMATION
            and facts.session_active
            and facts.location == Location.INSIDE
            and not facts.early_entry
        )
