"""Day-offset and urgency calculations for timeline events."""

import math
from datetime import date, datetime, time
from typing import Optional

from ..models.enums import UrgencyLevel


SECONDS_PER_DAY = 24 * 60 * 60

URGENT_WITHIN_DAYS = 10
WARNING_WITHIN_DAYS = 30


def calculate_days_until(event_date: date, now: datetime) -> int:
    """
    Signed number of days from ``now`` until ``event_date``.

    The event is taken at midnight of its calendar day, in the timezone of
    ``now``, and the difference is rounded up to whole days.
    """
    event_start = datetime.combine(event_date, time.min, tzinfo=now.tzinfo)
    delta = event_start - now
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def classify_urgency(days_until: Optional[int]) -> Optional[UrgencyLevel]:
    """
    Map a countdown to a deadline alert.

    Past events are OVERDUE, events within 10 days (including today) are
    URGENT, within 30 days WARNING; anything later has no alert.
    """
    if days_until is None:
        return None
    if days_until < 0:
        return UrgencyLevel.OVERDUE
    if days_until <= URGENT_WITHIN_DAYS:
        return UrgencyLevel.URGENT
    if days_until <= WARNING_WITHIN_DAYS:
        return UrgencyLevel.WARNING
    return None


def describe_countdown(days_until: Optional[int]) -> str:
    """Short human-readable countdown label."""
    if days_until is None:
        return "N/A"
    if days_until < 0:
        return f"{abs(days_until)} days overdue"
    return f"{days_until} days"
