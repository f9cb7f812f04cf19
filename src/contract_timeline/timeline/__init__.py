"""Derived timeline state: countdowns, urgency, ordering and calendar views."""

from .countdown import calculate_days_until, classify_urgency, describe_countdown
from .views import (
    TimelineSpan,
    TimelineSummary,
    build_timeline,
    events_on,
    month_calendar,
    position_percent,
    refresh_days_until,
    sort_events,
    summarize,
    timeline_span,
)

__all__ = [
    "calculate_days_until",
    "classify_urgency",
    "describe_countdown",
    "TimelineSpan",
    "TimelineSummary",
    "build_timeline",
    "events_on",
    "month_calendar",
    "position_percent",
    "refresh_days_until",
    "sort_events",
    "summarize",
    "timeline_span",
]
