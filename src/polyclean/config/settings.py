"""Configuration settings for Polyclean."""

from pathlib import Path

from pydantic import BaseModel, Field


class ToleranceConfig(BaseModel):
    """Default tolerances for the cleaning operations.

    All distances are in drawing units. The engine never reads these
    directly; every operation takes its tolerance as a parameter and the
    values here only feed the command line defaults.
    """

    duplicate_tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Distance under which consecutive vertices are merged",
    )
    reduce_epsilon: float = Field(
        default=1.0,
        ge=0.0,
        description="Maximum deviation of a vertex dropped by point reduction",
    )
    colinear_angle: float = Field(
        default=1e-6,
        ge=0.0,
        le=3.141592653589793,
        description="Maximum direction change (radians) for a vertex to count as collinear",
    )
    snap_epsilon: float = Field(
        default=20.0,
        gt=0.0,
        description="Maximum gap bridged when trimming or extending endpoints",
    )
    degrees_per_chord: float = Field(
        default=10.0,
        gt=0.0,
        le=180.0,
        description="Arc sweep covered by one chord when fitting arcs automatically",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max worker processes (None = auto, 1 = run in-process)",
    )
    iterate_reduce: bool = Field(
        default=False,
        description="Repeat point reduction until no more vertices are removed",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class PolycleanSettings(BaseModel):
    """Main application settings."""

    tolerances: ToleranceConfig = Field(default_factory=ToleranceConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> PolycleanSettings:
    """Get default application settings."""
    return PolycleanSettings()
