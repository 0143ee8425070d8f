"""Logging utilities for homogeom."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

from homogeom.config import LoggingConfig


@dataclass
class BatchStats:
    """Statistics from a batch intersection run."""

    pair_count: int = 0
    hit_count: int = 0
    empty_count: int = 0
    error_count: int = 0
    point_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    pair_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate run duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def completed_count(self) -> int:
        return self.hit_count + self.empty_count + self.error_count


_FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Handlers installed on the root logger by the last configure_logging call
_installed_handlers: list[logging.Handler] = []


def _make_handler(handler: logging.Handler, level: str, fmt: str) -> logging.Handler:
    handler.setLevel(logging.getLevelName(level.upper()))
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Route structlog events to a log file and, unless quiet, to stderr.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_file: Destination file; ``homogeom_<timestamp>.log`` in the
            working directory when None
        console_level: Minimum level echoed to stderr
        file_level: Minimum level written to the file
        quiet: Skip the stderr handler

    Returns:
        Logger bound to the ``homogeom`` name
    """
    if log_file is None:
        log_file = Path(f"homogeom_{datetime.now():%Y%m%d_%H%M%S}.log")

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    _installed_handlers.append(
        _make_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, _FILE_FORMAT)
    )
    if not quiet:
        _installed_handlers.append(
            _make_handler(logging.StreamHandler(), console_level, "%(levelname)s %(message)s")
        )
    for handler in _installed_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("homogeom")
    logger.info("Logging configured", log_file=str(log_file), file_level=file_level, quiet=quiet)
    return logger


def configure_logging_from_settings(
    config: LoggingConfig, quiet: bool = False
) -> structlog.stdlib.BoundLogger:
    """Call ``configure_logging`` with the values of a ``LoggingConfig``."""
    return configure_logging(
        log_file=config.log_file,
        console_level=config.log_level,
        file_level=config.file_log_level,
        quiet=quiet,
    )


def pair_name(pair: tuple[int, int]) -> str:
    """Readable identifier of a shape pair, e.g. ``"3-7"``."""
    return f"{pair[0]}-{pair[1]}"


class BatchLogger:
    """Logger for tracking batch progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = BatchStats()

    def log_batch_start(self, shape_count: int, pair_count: int, max_workers: int | None) -> None:
        """Log start of a batch run."""
        self._logger.info(
            "Starting batch intersection",
            shapes=shape_count,
            pairs=pair_count,
            max_workers=max_workers,
        )
        self._stats.pair_count = pair_count

    def log_pair_complete(
        self,
        pair: tuple[int, int],
        point_count: int,
        duration_ms: float,
    ) -> None:
        """Log a pair that intersects."""
        self._logger.debug(
            "Pair intersects",
            pair=pair_name(pair),
            points=point_count,
            duration_ms=round(duration_ms, 3),
        )
        self._stats.hit_count += 1
        self._stats.point_count += point_count
        self._stats.pair_timings_ms.append(duration_ms)

    def log_pair_empty(self, pair: tuple[int, int], duration_ms: float) -> None:
        """Log a pair without intersection."""
        self._logger.debug("Pair does not intersect", pair=pair_name(pair))
        self._stats.empty_count += 1
        self._stats.pair_timings_ms.append(duration_ms)

    def log_pair_error(
        self,
        pair: tuple[int, int],
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log pair processing error."""
        self._logger.error(
            "Pair intersection failed",
            pair=pair_name(pair),
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((pair_name(pair), str(error)))

    def log_batch_complete(self) -> None:
        """Log end of a batch run."""
        self._logger.info(
            "Batch intersection complete",
            pairs=self._stats.pair_count,
            hits=self._stats.hit_count,
            empty=self._stats.empty_count,
            errors=self._stats.error_count,
            points=self._stats.point_count,
            duration_seconds=round(self._stats.duration_seconds, 3),
        )

    @property
    def stats(self) -> BatchStats:
        """Get current batch statistics."""
        return self._stats
