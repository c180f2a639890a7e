"""Human-readable strict distances between two instants.

Labels look like "1 hour" or "3 days". The unit is the largest one the
distance reaches and the count is floored, so "1 hour" covers every distance
from 60 up to 119 minutes. Reminder labels are matched against these strings
exactly.
"""

from datetime import datetime

MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 1440
MINUTES_IN_MONTH = 43200
MINUTES_IN_YEAR = 525600


def _label(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def distance_label(start: datetime, end: datetime) -> str:
    """Return the strict distance label between two datetimes (order-insensitive)."""
    seconds = int(abs((end - start).total_seconds()))
    minutes = seconds / 60

    if minutes < 1:
        return _label(seconds, "second")
    if minutes < MINUTES_IN_HOUR:
        return _label(int(minutes), "minute")
    if minutes < MINUTES_IN_DAY:
        return _label(int(minutes // MINUTES_IN_HOUR), "hour")
    if minutes < MINUTES_IN_MONTH:
        return _label(int(minutes // MINUTES_IN_DAY), "day")
    if minutes < MINUTES_IN_YEAR:
        return _label(int(minutes // MINUTES_IN_MONTH), "month")
    return _label(int(minutes // MINUTES_IN_YEAR), "year")
