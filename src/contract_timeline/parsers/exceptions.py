"""Custom exceptions for document text extraction."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ExtractionError(Exception):
    """
    Base exception for document extraction errors.

    Provides the file name, the location of the failure and additional
    context for debugging and user feedback.

    Attributes:
        message: Human-readable error description.
        filename: Name of the uploaded file that caused the error.
        location: Specific location within the file (page, paragraph).
        details: Additional error details.
    """
    message: str
    filename: Optional[str] = None
    location: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.filename:
            parts.append(f"File: {self.filename}")
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "filename": self.filename,
            "location": self.location,
            "details": self.details,
        }


@dataclass
class UnsupportedFormatError(ExtractionError):
    """
    Exception raised when an uploaded file type is not accepted.
    """

    def get_supported_formats(self) -> list[str]:
        """Return list of supported formats."""
        return self.details.get("supported_formats", [".pdf"])


@dataclass
class FileTooLargeError(ExtractionError):
    """
    Exception raised when an upload exceeds the configured size limit.
    """

    @property
    def limit_bytes(self) -> Optional[int]:
        return self.details.get("max_bytes")
