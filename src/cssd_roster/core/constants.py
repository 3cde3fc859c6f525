"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500
DEFAULT_ISOLATION_LEVEL = "REPEATABLE READ"
