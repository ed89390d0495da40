"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

# Reservation config defaults (used when a space has no active config)
DEFAULT_RESERVATION_START = "08:00"
DEFAULT_RESERVATION_END = "22:00"
DEFAULT_RESERVATION_DURATION_MINUTES = 60
DEFAULT_MIN_ADVANCE_HOURS = 24
DEFAULT_MAX_ADVANCE_DAYS = 30

# A booking this long (or longer) is charged the daily rate
FULL_DAY_MINUTES = 480

DELIVERY_CODE_LENGTH = 8
RECENT_INCIDENT_DAYS = 7
EXPIRING_CONTRACT_DAYS = 30

# Upper bound used when a statistic needs every row of a listing
ALL_ROWS = 1_000_000
