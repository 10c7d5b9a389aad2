"""Configuration management for polyclean.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- ToleranceConfig: Default tolerances for cleaning operations
- ProcessingConfig: Batch processing settings
- LoggingConfig: Logging settings
- PolycleanSettings: Main application settings
"""

from polyclean.config.settings import (
    LoggingConfig,
    PolycleanSettings,
    ProcessingConfig,
    ToleranceConfig,
    get_default_settings,
)

__all__ = [
    "LoggingConfig",
    "PolycleanSettings",
    "ProcessingConfig",
    "ToleranceConfig",
    "get_default_settings",
]
