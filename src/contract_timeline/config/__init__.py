"""Configuration management for the Contract Timeline Analyzer."""

from .config_manager import ConfigurationManager, configure_logging, load_config
from .models import AppConfig, ConfigurationError, ValidationResult

__all__ = [
    "ConfigurationManager",
    "configure_logging",
    "load_config",
    "AppConfig",
    "ConfigurationError",
    "ValidationResult",
]
