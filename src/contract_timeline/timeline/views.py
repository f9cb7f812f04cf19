"""Derived timeline data for the dashboard.

Everything here is computed from stored contracts at read time; nothing is
written back to the store.
"""

import calendar
import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models.contract import Contract, ContractAnalysis, TimelineEvent
from ..models.enums import EventType, RiskLevel, UrgencyLevel
from ..parsers.serialization import ContractSerializer
from .countdown import calculate_days_until, classify_urgency, describe_countdown


# Used when all events fall on the same day
DEFAULT_SPAN_DAYS = 365


def sort_events(events: Iterable[TimelineEvent]) -> List[TimelineEvent]:
    """Events in chronological order; ties keep their original order."""
    return sorted(events, key=lambda e: e.date)


def refresh_days_until(analysis: ContractAnalysis, now: datetime) -> ContractAnalysis:
    """Copy of the analysis with every countdown recomputed against ``now``."""
    return dataclasses.replace(
        analysis,
        timeline_events=[
            dataclasses.replace(e, days_until=calculate_days_until(e.date, now))
            for e in analysis.timeline_events
        ],
    )


@dataclass
class TimelineSpan:
    """First and last event dates of a timeline."""
    start: date
    end: date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days or DEFAULT_SPAN_DAYS


def timeline_span(events: List[TimelineEvent], today: Optional[date] = None) -> TimelineSpan:
    """Date range covered by the events; an empty timeline spans today."""
    if not events:
        today = today or date.today()
        return TimelineSpan(start=today, end=today)
    ordered = sort_events(events)
    return TimelineSpan(start=ordered[0].date, end=ordered[-1].date)


def position_percent(event: TimelineEvent, span: TimelineSpan) -> float:
    """Horizontal offset of an event on the Gantt bar, 0 to 100."""
    return (event.date - span.start).days / span.total_days * 100


def events_on(events: Iterable[TimelineEvent], day: date) -> List[TimelineEvent]:
    """Events falling on one calendar day, in chronological order."""
    return [e for e in sort_events(events) if e.date == day]


def month_calendar(
    events: Iterable[TimelineEvent], year: int, month: int
) -> List[Tuple[date, List[TimelineEvent]]]:
    """Every day of a month paired with the events that fall on it."""
    by_day: Dict[date, List[TimelineEvent]] = {}
    for event in sort_events(events):
        if event.date.year == year and event.date.month == month:
            by_day.setdefault(event.date, []).append(event)

    _, days_in_month = calendar.monthrange(year, month)
    return [
        (date(year, month, day), by_day.get(date(year, month, day), []))
        for day in range(1, days_in_month + 1)
    ]


@dataclass
class TimelineSummary:
    """Aggregate figures shown above a contract's timeline."""
    total_events: int = 0
    overdue: int = 0
    upcoming: int = 0
    by_risk: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    by_urgency: Dict[str, int] = field(default_factory=dict)
    next_event: Optional[TimelineEvent] = None
    highest_risk: Optional[RiskLevel] = None


def summarize(events: Iterable[TimelineEvent], now: datetime) -> TimelineSummary:
    """Counts by risk, type and urgency plus the next upcoming event."""
    summary = TimelineSummary(
        by_risk={r.value: 0 for r in RiskLevel},
        by_type={t.value: 0 for t in EventType},
        by_urgency={u.value: 0 for u in UrgencyLevel},
    )
    for event in sort_events(events):
        days = calculate_days_until(event.date, now)
        summary.total_events += 1
        summary.by_risk[event.risk.value] += 1
        summary.by_type[event.type.value] += 1

        urgency = classify_urgency(days)
        if urgency is not None:
            summary.by_urgency[urgency.value] += 1

        if days < 0:
            summary.overdue += 1
        else:
            summary.upcoming += 1
            if summary.next_event is None:
                summary.next_event = dataclasses.replace(event, days_until=days)

        if summary.highest_risk is None or event.risk > summary.highest_risk:
            summary.highest_risk = event.risk
    return summary


def build_timeline(contract: Contract, now: datetime) -> Dict[str, Any]:
    """
    Serializable timeline view of a contract.

    Events are sorted, their countdowns recomputed against ``now`` and
    annotated with urgency, countdown label and Gantt position.
    """
    analysis = refresh_days_until(contract.analysis, now)
    events = sort_events(analysis.timeline_events)
    span = timeline_span(events, today=now.date())
    summary = summarize(events, now)

    entries = []
    for event in events:
        entry = ContractSerializer.event_to_dict(event)
        urgency = classify_urgency(event.days_until)
        entry["urgency"] = urgency.value if urgency else None
        entry["countdown"] = describe_countdown(event.days_until)
        entry["position"] = round(position_percent(event, span), 2)
        entries.append(entry)

    return {
        "contractId": contract.contract_id,
        "filename": contract.filename,
        "asOf": now.isoformat(),
        "span": {
            "start": span.start.isoformat(),
            "end": span.end.isoformat(),
            "totalDays": span.total_days,
        },
        "events": entries,
        "summary": {
            "totalEvents": summary.total_events,
            "overdue": summary.overdue,
            "upcoming": summary.upcoming,
            "byRisk": summary.by_risk,
            "byType": summary.by_type,
            "byUrgency": summary.by_urgency,
            "nextEventId": summary.next_event.id if summary.next_event else None,
            "highestRisk": summary.highest_risk.value if summary.highest_risk else None,
        },
    }
