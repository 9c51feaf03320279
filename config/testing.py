import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_attendance_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

TIMEZONE = "Asia/Manila"
LOG_LEVEL = "WARNING"

RECONCILE_WORKERS = 2
REVIEW_WORKERS = 2

RAW_FALLBACK_FOR_TRACKED = True
