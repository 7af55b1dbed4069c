from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import (
    DEFAULT_ACADEMIC_YEAR,
    DEFAULT_EARLY_ARRIVAL_MINUTES,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_SEMESTER,
)
from .model import AcademicTerm, AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

KEY_ACADEMIC_YEAR = "current_academic_year"
KEY_SEMESTER = "current_semester"
KEY_EARLY_ARRIVAL = "student_early_arrival_window"
KEY_LATE_TOLERANCE = "late_tolerance_minutes"


class SettingsProvider:
    """Current term and time-window settings.

    Stored values in ``system_settings`` win over the configured defaults.
    """

    def __init__(
        self,
        settings: Optional[SettingsRepository] = None,
        *,
        default_term: AcademicTerm = AcademicTerm(DEFAULT_ACADEMIC_YEAR, DEFAULT_SEMESTER),
        early_arrival_minutes: int = DEFAULT_EARLY_ARRIVAL_MINUTES,
        late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    ):
        self._settings = settings
        self._default_term = default_term
        self._early = int(early_arrival_minutes)
        self._late = int(late_threshold_minutes)

    def current(self) -> AttendanceSettings:
        values = {}
        if self._settings is not None:
            values = self._settings.get_values([KEY_ACADEMIC_YEAR, KEY_SEMESTER, KEY_EARLY_ARRIVAL, KEY_LATE_TOLERANCE])

        return AttendanceSettings(
            term=AcademicTerm(
                academic_year=values.get(KEY_ACADEMIC_YEAR) or self._default_term.academic_year,
                semester=values.get(KEY_SEMESTER) or self._default_term.semester,
            ),
            early_arrival_minutes=self._minutes(values, KEY_EARLY_ARRIVAL, self._early),
            late_threshold_minutes=self._minutes(values, KEY_LATE_TOLERANCE, self._late),
        )

    @staticmethod
    def _minutes(values: dict, key: str, fallback: int) -> int:
        raw = values.get(key)
        if raw is None:
            return fallback
        try:
            minutes = int(raw)
        except ValueError:
            logger.warning("Ignoring non-numeric setting %s=%r", key, raw)
            return fallback
        if minutes < 0:
            logger.warning("Ignoring negative setting %s=%r", key, raw)
            return fallback
        return minutes
