import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ojt_attendance"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

TIMEZONE = os.getenv("TIMEZONE", "Asia/Manila")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

RECONCILE_WORKERS = int(os.getenv("RECONCILE_WORKERS", "8"))
REVIEW_WORKERS = int(os.getenv("REVIEW_WORKERS", "4"))

RAW_FALLBACK_FOR_TRACKED = bool(int(os.getenv("RAW_FALLBACK_FOR_TRACKED", "1")))
