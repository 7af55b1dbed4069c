import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Fallbacks when system_settings has no value
EARLY_ARRIVAL_WINDOW_MINUTES = int(os.getenv("EARLY_ARRIVAL_WINDOW_MINUTES", "15"))
LATE_THRESHOLD_MINUTES = int(os.getenv("LATE_THRESHOLD_MINUTES", "15"))
DEFAULT_ACADEMIC_YEAR = os.getenv("ACADEMIC_YEAR", "2024-2025")
DEFAULT_SEMESTER = os.getenv("SEMESTER", "First Semester")

SWEEP_ENABLED = bool(int(os.getenv("SWEEP_ENABLED", "1")))
SWEEP_INTERVAL_MINUTES = int(os.getenv("SWEEP_INTERVAL_MINUTES", "5"))

DOOR_LOCK_ENABLED = bool(int(os.getenv("DOOR_LOCK_ENABLED", "0")))
DOOR_LOCK_TIMEOUT_SECONDS = float(os.getenv("DOOR_LOCK_TIMEOUT_SECONDS", "5"))
