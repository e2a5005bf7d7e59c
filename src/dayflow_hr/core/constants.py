"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_DASHBOARD_CACHE_TTL_MS = 60 * 1000

AUDIT_NOTIFICATION_LIMIT = 10
LEAVE_NOTIFICATION_LIMIT = 10
PAYROLL_NOTIFICATION_LIMIT = 5

DEFAULT_TOKEN_EXPIRATION_SECONDS = 3600
TOKEN_ALGORITHM = "HS256"
REFRESH_TOKEN_EXPIRATION_SECONDS = 7 * 24 * 60 * 60
REFRESH_TOKEN_TYPE = "refresh"

PASSWORD_MIN_LENGTH = 8
