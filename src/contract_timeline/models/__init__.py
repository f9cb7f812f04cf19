"""Data models for the Contract Timeline Analyzer."""

from .contract import (
    Contract,
    ContractAnalysis,
    ContractMetadata,
    ContractSection,
    ProcessingStatus,
    TimelineEvent,
    UploadedFile,
)
from .enums import ErrorKind, EventType, RiskLevel, UploadState, UrgencyLevel

__all__ = [
    "Contract",
    "ContractAnalysis",
    "ContractMetadata",
    "ContractSection",
    "ProcessingStatus",
    "TimelineEvent",
    "UploadedFile",
    "ErrorKind",
    "EventType",
    "RiskLevel",
    "UploadState",
    "UrgencyLevel",
]
