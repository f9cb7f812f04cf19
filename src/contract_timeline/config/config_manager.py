"""Configuration Manager implementation for the Contract Timeline Analyzer.

Configuration is assembled from three layers, later layers winning:
built-in defaults, an optional JSON file or dictionary, and environment
variables.
"""

import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .models import AppConfig, ConfigurationError, ValidationResult


logger = logging.getLogger(__name__)

# Environment variable -> AppConfig field
ENVIRONMENT_VARIABLES = {
    "GEMINI_API_KEY": "gemini_api_key",
    "CONTRACT_TIMELINE_MODEL": "model_name",
    "CONTRACT_TIMELINE_REQUEST_TIMEOUT": "request_timeout",
    "CONTRACT_TIMELINE_DATABASE_URL": "database_url",
    "CONTRACT_TIMELINE_STAGE_DELAY": "stage_delay",
    "CONTRACT_TIMELINE_MAX_UPLOAD_BYTES": "max_upload_bytes",
    "CONTRACT_TIMELINE_LOG_LEVEL": "log_level",
}

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationManager:
    """
    Manager for application configuration.

    Handles loading, validation, and access to the AppConfig.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the configuration manager.

        Args:
            environ: Environment mapping to read overrides from
                (defaults to os.environ).
        """
        self._environ = environ if environ is not None else os.environ
        self._configuration = AppConfig()
        self._is_loaded = False

    @property
    def configuration(self) -> AppConfig:
        """Get the current configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    def load(
        self,
        source: Optional[Union[str, Path, Dict[str, Any]]] = None,
    ) -> ValidationResult:
        """
        Load and validate configuration.

        Args:
            source: Optional JSON file path or dictionary of AppConfig fields.

        Returns:
            ValidationResult with any warnings.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        raw: Dict[str, Any] = {}
        if source is not None:
            raw.update(self._parse_source(source))
        raw.update(self._read_environment())

        result, config = self._validate(raw)
        if not result.is_valid:
            raise ConfigurationError(
                "Configuration validation failed",
                validation_result=result
            )

        for warning in result.warnings:
            logger.warning(warning)

        self._configuration = config
        self._is_loaded = True
        return result

    def _parse_source(self, source: Union[str, Path, Dict[str, Any]]) -> Dict[str, Any]:
        """Parse a configuration source into a dictionary."""
        if isinstance(source, dict):
            return dict(source)

        path = Path(source)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
        return data

    def _read_environment(self) -> Dict[str, Any]:
        values = {}
        for variable, field_name in ENVIRONMENT_VARIABLES.items():
            value = self._environ.get(variable)
            if value is not None and value != "":
                values[field_name] = value
        return values

    def _validate(self, raw: Dict[str, Any]) -> tuple[ValidationResult, AppConfig]:
        """Validate raw values and build an AppConfig."""
        result = ValidationResult(is_valid=True)
        known = {f.name for f in dataclasses.fields(AppConfig)}
        values: Dict[str, Any] = {}

        for key, value in raw.items():
            if key not in known:
                result.add_warning(f"Unknown configuration key ignored: '{key}'")
                continue
            values[key] = value

        for name in ("request_timeout", "stage_delay"):
            if name in values:
                try:
                    values[name] = float(values[name])
                except (TypeError, ValueError):
                    result.add_error(f"'{name}' must be a number")

        if "max_upload_bytes" in values:
            try:
                values["max_upload_bytes"] = int(values["max_upload_bytes"])
            except (TypeError, ValueError):
                result.add_error("'max_upload_bytes' must be an integer")

        if not result.is_valid:
            return result, AppConfig()

        config = dataclasses.replace(AppConfig(), **values)

        if config.request_timeout <= 0:
            result.add_error("'request_timeout' must be greater than zero")
        if config.stage_delay < 0:
            result.add_error("'stage_delay' must not be negative")
        if config.max_upload_bytes <= 0:
            result.add_error("'max_upload_bytes' must be greater than zero")

        if isinstance(config.log_level, str):
            config.log_level = config.log_level.upper()
        if config.log_level not in VALID_LOG_LEVELS:
            result.add_error(f"'log_level' must be one of {VALID_LOG_LEVELS}")

        extensions = config.allowed_extensions
        if isinstance(extensions, str) or not all(
            isinstance(ext, str) and ext.startswith(".") for ext in extensions
        ):
            result.add_error("'allowed_extensions' must be a list like ['.pdf']")
        else:
            config.allowed_extensions = tuple(ext.lower() for ext in extensions)

        for name in ("model_name", "database_url", "contracts_key", "active_contract_key"):
            value = getattr(config, name)
            if not isinstance(value, str) or not value.strip():
                result.add_error(f"'{name}' must be a non-empty string")

        if config.contracts_key == config.active_contract_key:
            result.add_error("'contracts_key' and 'active_contract_key' must differ")

        if not config.has_api_key:
            result.add_warning(
                "GEMINI_API_KEY is not set; only the sample contract can be analyzed"
            )

        return result, config


def load_config(
    source: Optional[Union[str, Path, Dict[str, Any]]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Convenience function to load and validate an AppConfig."""
    manager = ConfigurationManager(environ=environ)
    manager.load(source)
    return manager.configuration


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for a server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
