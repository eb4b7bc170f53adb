"""Cache validity policy."""

from datetime import datetime, timedelta

from .models import as_utc

MAX_CACHE_AGE_DAYS = 7


class FeedCachePolicy:
    """Decides whether a cached feed is still fresh enough to serve.

    The window is a fixed duration (7 x 24 hours by default), so it does not
    shift around daylight saving transitions. Naive datetimes are read as UTC.
    """

    def __init__(self, max_age: timedelta = timedelta(days=MAX_CACHE_AGE_DAYS)):
        self.max_age = max_age

    def validate(self, timestamp: datetime, against: datetime) -> bool:
        """Return True if a cache saved at ``timestamp`` is valid at ``against``."""
        return as_utc(against) < as_utc(timestamp) + self.max_age
