import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_attendance"),
}

DEBUG = True

# Applies database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Every local date and window is interpreted in this zone
TIMEZONE = os.getenv("TIMEZONE", "Asia/Manila")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

RECONCILE_WORKERS = int(os.getenv("RECONCILE_WORKERS", "4"))
REVIEW_WORKERS = int(os.getenv("REVIEW_WORKERS", "4"))

# Count raw elapsed time as tracked when a session has no window to measure against
RAW_FALLBACK_FOR_TRACKED = bool(int(os.getenv("RAW_FALLBACK_FOR_TRACKED", "1")))
