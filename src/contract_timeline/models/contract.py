"""Contract and analysis data models for the Contract Timeline Analyzer."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from .enums import EventType, RiskLevel


@dataclass
class ContractMetadata:
    """
    Headline facts of a contract.

    Dates are None when the document does not state them.
    """
    value: str
    effective_date: Optional[date] = None
    expiry_date: Optional[date] = None
    parties: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.parties is None:
            self.parties = []


@dataclass
class ContractSection:
    """A titled section of the contract and its short summary."""
    section: str
    content: str


@dataclass(frozen=True)
class TimelineEvent:
    """
    A dated obligation or checkpoint extracted from a contract.

    Events are immutable; derived values such as the countdown are
    applied by building a new record with ``dataclasses.replace``.
    """
    id: str
    title: str
    date: date
    type: EventType
    risk: RiskLevel
    repercussion: str
    days_until: Optional[int] = None

    @property
    def is_overdue(self) -> bool:
        return self.days_until is not None and self.days_until < 0


@dataclass
class ContractAnalysis:
    """
    Structured result of analyzing one contract.

    Timeline events keep the order the model returned them in; use
    ``timeline.sort_events`` for chronological order.
    """
    metadata: ContractMetadata
    structure: List[ContractSection] = field(default_factory=list)
    timeline_events: List[TimelineEvent] = field(default_factory=list)

    def __post_init__(self):
        if self.structure is None:
            self.structure = []
        if self.timeline_events is None:
            self.timeline_events = []

    def get_event(self, event_id: str) -> Optional[TimelineEvent]:
        """Find a timeline event by its identifier."""
        for event in self.timeline_events:
            if event.id == event_id:
                return event
        return None


@dataclass(frozen=True)
class Contract:
    """An analyzed contract as committed to the contract store."""
    contract_id: str
    filename: str
    upload_date: datetime
    analysis: ContractAnalysis


@dataclass(frozen=True)
class ProcessingStatus:
    """Progress update emitted while an upload is processed."""
    stage: str
    progress: int


@dataclass(frozen=True)
class UploadedFile:
    """Raw document handed to the upload orchestrator."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)
