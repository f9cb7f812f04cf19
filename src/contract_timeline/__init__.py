"""
Contract Timeline Analyzer

Turns an uploaded contract document into a structured analysis with a
dated timeline of obligations, and keeps the analyzed contracts.
"""

__version__ = "0.1.0"

# Export main components
from .models.contract import (
    Contract,
    ContractAnalysis,
    ContractMetadata,
    ContractSection,
    ProcessingStatus,
    TimelineEvent,
    UploadedFile,
)
from .models.enums import ErrorKind, EventType, RiskLevel, UploadState, UrgencyLevel
from .analysis import (
    ContractAnalyzer,
    GeminiCompletionClient,
    UploadFailedError,
    build_prompt,
    parse_response,
    post_process,
)
from .parsers import ContractSerializer, DocumentTextExtractor
from .storage import ContractStore, InMemoryKeyValueStorage, SqlKeyValueStorage
from .timeline import build_timeline, calculate_days_until, classify_urgency
from .orchestrator import UploadOrchestrator, generate_contract_id
from .config import AppConfig, ConfigurationError, ConfigurationManager, load_config

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
    "ContractAnalyzer",
    "GeminiCompletionClient",
    "UploadFailedError",
    "build_prompt",
    "parse_response",
    "post_process",
    "ContractSerializer",
    "DocumentTextExtractor",
    "ContractStore",
    "InMemoryKeyValueStorage",
    "SqlKeyValueStorage",
    "build_timeline",
    "calculate_days_until",
    "classify_urgency",
    "UploadOrchestrator",
    "generate_contract_id",
    "AppConfig",
    "ConfigurationError",
    "ConfigurationManager",
    "load_config",
]
