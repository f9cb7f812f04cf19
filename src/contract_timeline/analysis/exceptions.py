"""Custom exceptions for contract analysis."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..models.enums import ErrorKind


@dataclass
class ContractAnalysisError(Exception):
    """
    Base exception for failures while analyzing a contract.

    Attributes:
        message: Human-readable error description.
        details: Additional diagnostic details.
    """
    message: str
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


@dataclass
class CompletionTimeoutError(ContractAnalysisError):
    """
    Raised when the model does not answer within the configured bound.

    The pending request is abandoned, not cancelled.
    """
    timeout: float = 10.0

    def __str__(self) -> str:
        return f"{self.message} (after {self.timeout:g}s)"


@dataclass
class EmptyResponseError(ContractAnalysisError):
    """Raised when the model answers with an empty body."""


@dataclass
class UpstreamError(ContractAnalysisError):
    """
    Raised for network, authentication or model-side failures.

    The upstream message is passed through unchanged.
    """


@dataclass
class MalformedResponseError(ContractAnalysisError):
    """
    Raised when the model output cannot be decoded into an analysis.

    Carries the offending text for diagnosis.
    """
    raw_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["raw_text"] = self.raw_text
        return data


@dataclass
class UploadInProgressError(ContractAnalysisError):
    """Raised when an upload is started while another is still running."""


class UploadFailedError(Exception):
    """
    Classified failure of an upload, delivered to the caller.

    ``kind`` is TIMEOUT when the model took too long, GENERIC otherwise.
    ``cause`` holds the underlying exception for logs; it is never shown
    to end users.
    """

    TIMEOUT_MESSAGE = (
        "The analysis took too long to complete. "
        "Try again later or use the sample contract for an offline demonstration."
    )
    GENERIC_MESSAGE = "The contract could not be analyzed. Please try again."

    def __init__(self, kind: ErrorKind, cause: Optional[BaseException] = None):
        self.kind = kind
        self.cause = cause
        super().__init__(self.user_message)

    @property
    def is_timeout(self) -> bool:
        return self.kind == ErrorKind.TIMEOUT

    @property
    def user_message(self) -> str:
        """Message that is safe to show to end users."""
        if self.is_timeout:
            return self.TIMEOUT_MESSAGE
        return self.GENERIC_MESSAGE

    @classmethod
    def classify(cls, error: BaseException) -> "UploadFailedError":
        """Wrap an arbitrary failure, recognising timeouts."""
        if isinstance(error, UploadFailedError):
            return error
        if isinstance(error, CompletionTimeoutError):
            return cls(ErrorKind.TIMEOUT, error)
        return cls(ErrorKind.GENERIC, error)

    def to_dict(self) -> dict[str, Any]:
        cause = None
        if isinstance(self.cause, ContractAnalysisError):
            cause = self.cause.to_dict()
        elif self.cause is not None:
            cause = {"error_type": type(self.cause).__name__, "message": str(self.cause)}
        return {
            "kind": self.kind.value,
            "message": self.user_message,
            "cause": cause,
        }
