"""Post-processing of decoded analyses: event ids and countdowns."""

import dataclasses
from datetime import datetime

from ..models.contract import ContractAnalysis, TimelineEvent
from ..timeline.countdown import calculate_days_until


def post_process(analysis: ContractAnalysis, now: datetime) -> ContractAnalysis:
    """
    Assign event identifiers and compute each event's countdown.

    Events that already carry an id keep it; others get their 1-based
    position in the original sequence. The input analysis is not modified.

    Args:
        analysis: Decoded analysis from the response parser or a fixture.
        now: Reference moment for ``days_until``.

    Returns:
        A new ContractAnalysis with finalized events.
    """
    events = [
        _finalize_event(event, index, now)
        for index, event in enumerate(analysis.timeline_events)
    ]
    return ContractAnalysis(
        metadata=dataclasses.replace(analysis.metadata, parties=list(analysis.metadata.parties)),
        structure=list(analysis.structure),
        timeline_events=events,
    )


def _finalize_event(event: TimelineEvent, index: int, now: datetime) -> TimelineEvent:
    return dataclasses.replace(
        event,
        id=event.id or str(index + 1),
        days_until=calculate_days_until(event.date, now),
    )
