"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_PAGE_SIZE = 50
MIN_PASSWORD_LENGTH = 6
ACTIVITY_QUERY_LIMIT = 50
ACTIVITY_FEED_SIZE = 15
