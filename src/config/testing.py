import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

EARLY_ARRIVAL_WINDOW_MINUTES = 15
LATE_THRESHOLD_MINUTES = 15
DEFAULT_ACADEMIC_YEAR = "2024-2025"
DEFAULT_SEMESTER = "First Semester"

SWEEP_ENABLED = False
SWEEP_INTERVAL_MINUTES = 5

DOOR_LOCK_ENABLED = False
DOOR_LOCK_TIMEOUT_SECONDS = 1
