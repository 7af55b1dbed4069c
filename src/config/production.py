import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

EARLY_ARRIVAL_WINDOW_MINUTES = int(os.getenv("EARLY_ARRIVAL_WINDOW_MINUTES", "15"))
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "15"))
DEFAULT_ACADEMIC_YEAR = os.getenv("ACADEMIC_YEAR", "2024-2025")
DEFAULT_SEMESTER = os.getenv("SEMESTER", "First Semester")

# Every worker schedules the sweep; the MySQL advisory lock lets one of them run it.
SWEEP_ENABLED = bool(int(os.getenv("SWEEP_ENABLED", "1")))
SWEEP_INTERVAL_MINUTES = int(os.getenv("SWEEP_INTERVAL_MINUTES", "5"))

DOOR_LOCK_ENABLED = bool(int(os.getenv("DOOR_LOCK_ENABLED", "1")))
DOOR_LOCK_TIMEOUT_SECONDS = float(os.getenv("DOOR_LOCK_TIMEOUT_SECONDS", "5"))
