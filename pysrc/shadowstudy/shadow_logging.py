"""
Host-aware logging for the shadow engine.

Provides a small logger registry with two backends:
- Python: Standard logging module (default)
- Sink: A host-supplied callable, e.g. a UI status feed, receiving
  ``(level, message)`` pairs

Usage:
    from shadowstudy.shadow_logging import get_logger

    logger = get_logger(__name__)
    logger.info("Height grid built: 50×50 cells")
    logger.debug(f"Rasterised {n} buildings")
    logger.warning("No DEM metadata supplied, accuracy unknown")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import IntEnum

LogSink = Callable[[int, str], None]


class LogLevel(IntEnum):
    """Log levels matching Python logging."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class ShadowLogger:
    """
    Logger that forwards to a host sink when one is installed.

    Falls back to the standard logging module otherwise.
    """

    def __init__(self, name: str, level: LogLevel = LogLevel.INFO):
        """
        Initialize logger.

        Args:
            name: Logger name (usually module name)
            level: Minimum log level to display
        """
        self.name = name
        self.level = level
        self._sink: LogSink | None = None

    def set_sink(self, sink: LogSink | None) -> None:
        """
        Set (or clear) the host sink for this logger.

        Args:
            sink: Callable taking ``(level, message)``, or None for logging.
        """
        self._sink = sink

    def _log(self, level: LogLevel, message: str) -> None:
        if level < self.level:
            return

        if self._sink is not None:
            self._sink(int(level), f"{self.name}: {message}")
        else:
            logging.getLogger(self.name).log(level, message)

    def debug(self, message: str) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message)

    def set_level(self, level: LogLevel | int) -> None:
        """Set minimum log level."""
        self.level = LogLevel(level) if isinstance(level, int) else level


# Global logger registry
_loggers: dict[str, ShadowLogger] = {}
_global_sink: LogSink | None = None


def get_logger(name: str, level: LogLevel | int = LogLevel.INFO) -> ShadowLogger:
    """
    Get or create a logger for the given name.

    Args:
        name: Logger name (usually module name or __name__)
        level: Minimum log level (default: INFO)

    Returns:
        ShadowLogger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Analysis started")
    """
    if name not in _loggers:
        logger = ShadowLogger(name, LogLevel(level) if isinstance(level, int) else level)
        logger.set_sink(_global_sink)
        _loggers[name] = logger
    return _loggers[name]


def set_global_level(level: LogLevel | int) -> None:
    """
    Set log level for all existing loggers.

    Example:
        >>> import shadowstudy.shadow_logging as slog
        >>> slog.set_global_level(slog.LogLevel.DEBUG)
    """
    level = LogLevel(level) if isinstance(level, int) else level
    for logger in _loggers.values():
        logger.set_level(level)


def set_global_sink(sink: LogSink | None) -> None:
    """
    Route all loggers (existing and future) to a host sink.

    Pass None to restore the standard logging backend.
    """
    global _global_sink
    _global_sink = sink
    for logger in _loggers.values():
        logger.set_sink(sink)
