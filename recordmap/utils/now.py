"""Current time as stored in managed timestamp columns."""

import datetime


def utcnow() -> datetime.datetime:
    """Naive UTC datetime, truncated to the second."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None, microsecond=0)
