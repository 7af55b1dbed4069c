"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_EARLY_ARRIVAL_MINUTES = 15
DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_SWEEP_INTERVAL_MINUTES = 5
DEFAULT_DOOR_LOCK_TIMEOUT_SECONDS = 5

DEFAULT_ACADEMIC_YEAR = "2024-2025"
DEFAULT_SEMESTER = "First Semester"

# Window used when a scan names a subject that has no schedule in the room yet.
DEFAULT_CLASS_START = time(8, 0)
DEFAULT_CLASS_END = time(17, 0)

ADMIN_SUBJECT_CODE = "ADMIN-ACCESS"
ADMIN_SUBJECT_NAME = "Administrative Access"
ADMIN_DAY_START = time(0, 0)
ADMIN_DAY_END = time(23, 59)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

FINGERPRINT_IDENTIFIER_PREFIX = "FP_"

SWEEP_LOCK_NAME = "classroom_attendance.no_show_sweep"
