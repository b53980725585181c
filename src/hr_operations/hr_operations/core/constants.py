"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ORG_TIMEZONE = "Asia/Jakarta"
MIN_ADJUSTMENT_REASON_LENGTH = 10
DEFAULT_ROUNDING_INTERVAL_MINUTES = 15
DEFAULT_LIST_LIMIT = 200
OVERTIME_NOTE = "outside scheduled shift (overtime)"
