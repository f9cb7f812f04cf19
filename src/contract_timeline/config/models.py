"""Data models for configuration management."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..analysis.completion_client import DEFAULT_MODEL_NAME, DEFAULT_TIMEOUT
from ..analysis.fixtures import FIXTURE_FILENAME, FIXTURE_MARKER
from ..parsers.text_extractor import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_MAX_UPLOAD_BYTES
from ..storage.contract_store import ACTIVE_CONTRACT_KEY, CONTRACTS_KEY
from ..storage.database import DEFAULT_DATABASE_URL


@dataclass
class AppConfig:
    """
    Complete application configuration.

    Defaults give a 10 second model timeout, a 10 MB upload limit and the
    sample-contract short-circuit.
    """
    gemini_api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL_NAME
    request_timeout: float = DEFAULT_TIMEOUT
    database_url: str = DEFAULT_DATABASE_URL
    stage_delay: float = 0.2  # seconds between cosmetic progress stages
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: Tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS
    fixture_filename: str = FIXTURE_FILENAME
    fixture_marker: str = FIXTURE_MARKER
    contracts_key: str = CONTRACTS_KEY
    active_contract_key: str = ACTIVE_CONTRACT_KEY
    log_level: str = "INFO"

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
