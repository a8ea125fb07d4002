"""
DateTime utility functions for rendering Jenkins build times.
"""
from datetime import datetime, timedelta, timezone

MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1000


def format_duration_ms(ms):
    """
    Format a build duration given in milliseconds.

    Picks the largest unit that is at least 1 and renders one decimal place,
    e.g. "1.5m", "1.0h", "5.0s". A duration of 0 means Jenkins has not
    reported one yet and renders as "N/A".

    Args:
        ms: duration in milliseconds

    Returns:
        str: Formatted duration
    """
    if ms == 0:
        return "N/A"

    if ms >= MS_PER_HOUR:
        return f"{ms / MS_PER_HOUR:.1f}h"
    if ms >= MS_PER_MINUTE:
        return f"{ms / MS_PER_MINUTE:.1f}m"
    return f"{ms / MS_PER_SECOND:.1f}s"


def format_datetime_local(dt):
    """
    Format a datetime as RFC 3339 in the local timezone of the process.

    Args:
        dt: datetime object, naive values are assumed to be UTC

    Returns:
        str: e.g. "2025-10-15T14:30:45-06:00", or "...Z" when local time is UTC
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    local_dt = dt.astimezone().replace(microsecond=0)
    if local_dt.utcoffset() == timedelta(0):
        return local_dt.replace(tzinfo=None).isoformat() + "Z"
    return local_dt.isoformat()


def format_epoch_millis(ms):
    """
    Format a Jenkins epoch-millisecond timestamp as RFC 3339 in local time.

    Sub-second precision is truncated. 0 means the timestamp is unset and
    renders as an empty string, as does a timestamp outside the years
    datetime can represent.
    """
    if not ms:
        return ""

    # truncate toward zero
    seconds = abs(ms) // 1000
    if ms < 0:
        seconds = -seconds

    try:
        return format_datetime_local(datetime.fromtimestamp(seconds, tz=timezone.utc))
    except (OverflowError, ValueError, OSError):
        return ""
