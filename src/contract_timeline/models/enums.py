"""Enumerations for the Contract Timeline Analyzer."""

from enum import Enum


class EventType(Enum):
    """Kinds of dated obligations extracted from a contract."""
    DELIVERABLE = "Deliverable"
    MILESTONE = "Milestone"
    PAYMENT = "Payment"
    RENEWAL = "Renewal"
    TERMINATION = "Termination"


class RiskLevel(Enum):
    """Severity attached to a timeline event, ordered Low < Critical."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def severity(self) -> int:
        """Numeric rank of this level (Low = 0)."""
        return _RISK_ORDER.index(self)

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity >= other.severity


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL]


class UrgencyLevel(Enum):
    """Deadline alert derived from the countdown to an event."""
    OVERDUE = "OVERDUE"
    URGENT = "URGENT"
    WARNING = "WARNING"


class UploadState(Enum):
    """States an upload passes through in the orchestrator."""
    IDLE = "idle"
    EXTRACTING = "extracting"
    SHORT_CIRCUIT = "short_circuit"
    REQUESTING = "requesting"
    PARSING = "parsing"
    POST_PROCESSING = "post_processing"
    COMMITTED = "committed"
    FAILED = "failed"


class ErrorKind(Enum):
    """Classification of a failed upload delivered to callers."""
    TIMEOUT = "timeout"
    GENERIC = "generic"
