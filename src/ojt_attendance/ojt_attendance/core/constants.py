"""Engine constants and defaults."""

# An "in" punch may land in a slot this long before the slot's window opens.
SLOT_GRACE_BEFORE_MINUTES = 30

# A synthesized close-out never sits closer than this to its "in" punch.
VIRTUAL_OUT_MIN_MINUTES = 1

DEFAULT_REPORT_DAYS = 7
DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_RECONCILE_WORKERS = 4
DEFAULT_REVIEW_WORKERS = 4

VIRTUAL_REF_PREFIX = "virtual"
