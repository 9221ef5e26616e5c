"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EMBEDDING_DIMENSION = 128
DEFAULT_DISTANCE_THRESHOLD = 0.6
DEFAULT_REFERENCE_TIMEZONE = "UTC"

UNKNOWN_LABEL = "unknown"
# Reported for "no confident match"; above any realistic threshold.
UNKNOWN_DISTANCE = 1.0

REPORT_CSV_HEADERS = ("Name", "Date", "Time")
REPORT_FILENAME_PREFIX = "attendance-report"
