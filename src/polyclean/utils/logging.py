"""Logging utilities for Polyclean."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_NAME = "polyclean"


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    unchanged_count: int = 0
    error_count: int = 0
    vertices_removed: int = 0
    curves_added: int = 0
    curves_retired: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def changed_count(self) -> int:
        return self.processed_count - self.unchanged_count

    @property
    def avg_time_ms(self) -> float | None:
        if not self.timings_ms:
            return None
        return sum(self.timings_ms) / len(self.timings_ms)

    @property
    def min_time_ms(self) -> float | None:
        return min(self.timings_ms) if self.timings_ms else None

    @property
    def max_time_ms(self) -> float | None:
        return max(self.timings_ms) if self.timings_ms else None


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(_HANDLER_NAME)
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("polyclean")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_polyline_start(self, handle: str, operation: str) -> None:
        """Log start of polyline processing."""
        self._logger.debug("Processing polyline", handle=handle, operation=operation)

    def log_polyline_complete(
        self,
        handle: str,
        changed: bool,
        vertices_removed: int,
        duration_ms: float,
    ) -> None:
        """Log successful polyline processing."""
        self._logger.info(
            "Polyline processed",
            handle=handle,
            changed=changed,
            vertices_removed=vertices_removed,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.vertices_removed += vertices_removed
        if not changed:
            self._stats.unchanged_count += 1

    def log_polyline_error(
        self,
        handle: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log polyline processing error."""
        self._logger.error(
            "Polyline processing failed",
            handle=handle,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((handle, str(error)))

    def log_self_intersection(self, handle: str, points: list[tuple[float, float]]) -> None:
        """Log a polyline found to cross itself."""
        self._logger.warning(
            "Self-intersection detected",
            handle=handle,
            count=len(points),
            points=[(round(x, 6), round(y, 6)) for x, y in points],
        )

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
