"""Custom exceptions for contract persistence."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class StorageError(Exception):
    """
    Exception raised when the durable key-value store cannot be read or written.

    Attributes:
        message: Human-readable error description.
        key: Storage key involved, if any.
        operation: "get", "set" or "delete".
        details: Additional error details.
    """
    message: str
    key: Optional[str] = None
    operation: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"Operation: {self.operation}")
        if self.key:
            parts.append(f"Key: {self.key}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "key": self.key,
            "operation": self.operation,
            "details": self.details,
        }
