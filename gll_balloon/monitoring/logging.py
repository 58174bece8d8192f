"""
Structured logging for balloon builds.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def numeric(self) -> int:
        """Get numeric log level."""
        return {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
            "critical": logging.CRITICAL,
        }[self.value]


@dataclass
class LogRecord:
    """A structured log record.

    Attributes:
        level: Log level.
        event: Event name/type.
        message: Human-readable message.
        timestamp: Unix timestamp.
        data: Additional structured data.
    """

    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)

    logger_name: str = ""
    thread_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, with data fields flattened in."""
        d = asdict(self)
        d.update(d.pop("data", {}))
        return d

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=str)


class StructuredLogger:
    """Structured event logging with JSON output.

    Example:
        logger = StructuredLogger("gll_balloon")

        logger.info(
            "geometry_built",
            message="Balloon geometry ready",
            vertices=1332,
            source="cab-12:0",
        )

        # Bind context carried by every record
        ctx_logger = logger.bind(source="cab-12:0")
        ctx_logger.grid_unavailable()
    """

    def __init__(
        self,
        name: str = "gll_balloon",
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
    ):
        """Initialize the logger.

        Args:
            name: Logger name.
            level: Minimum log level.
            output: Output stream (default: stderr).
            json_format: Output as JSON (vs. human-readable).
        """
        self.name = name
        self._level = level
        self._output = output or sys.stderr
        self._json_format = json_format
        self._context: dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def level(self) -> LogLevel:
        return self._level

    def bind(self, **context: Any) -> "StructuredLogger":
        """Create a new logger with bound context."""
        new_logger = StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        **data: Any,
    ) -> None:
        if level.numeric < self._level.numeric:
            return

        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            data={**self._context, **data},
            logger_name=self.name,
            thread_name=threading.current_thread().name,
        )

        self._emit(record)

    def _emit(self, record: LogRecord) -> None:
        with self._lock:
            if self._json_format:
                line = record.to_json()
            else:
                line = self._format_human(record)

            print(line, file=self._output)

    def _format_human(self, record: LogRecord) -> str:
        timestamp = time.strftime(
            "%Y-%m-%d %H:%M:%S",
            time.localtime(record.timestamp),
        )

        parts = [
            f"[{timestamp}]",
            f"[{record.level.upper()}]",
            f"[{record.event}]",
        ]

        if record.message:
            parts.append(record.message)

        if record.data:
            data_str = " ".join(f"{k}={v}" for k, v in record.data.items())
            parts.append(f"({data_str})")

        return " ".join(parts)

    def debug(self, event: str, message: str = "", **data: Any) -> None:
        """Log at DEBUG level."""
        self._log(LogLevel.DEBUG, event, message, **data)

    def info(self, event: str, message: str = "", **data: Any) -> None:
        """Log at INFO level."""
        self._log(LogLevel.INFO, event, message, **data)

    def warning(self, event: str, message: str = "", **data: Any) -> None:
        """Log at WARNING level."""
        self._log(LogLevel.WARNING, event, message, **data)

    def error(self, event: str, message: str = "", **data: Any) -> None:
        """Log at ERROR level."""
        self._log(LogLevel.ERROR, event, message, **data)

    def critical(self, event: str, message: str = "", **data: Any) -> None:
        """Log at CRITICAL level."""
        self._log(LogLevel.CRITICAL, event, message, **data)

    # Balloon events

    def grid_resolved(
        self,
        full_meridian_count: int,
        full_parallel_count: int,
        symmetry: str,
        **extra: Any,
    ) -> None:
        self.debug(
            "grid_resolved",
            f"Grid {full_meridian_count} x {full_parallel_count} ({symmetry})",
            full_meridian_count=full_meridian_count,
            full_parallel_count=full_parallel_count,
            symmetry=symmetry,
            **extra,
        )

    def grid_unavailable(self, **extra: Any) -> None:
        self.warning(
            "grid_unavailable",
            "No directivity data available for this source",
            **extra,
        )

    def global_max_scan(self, global_max: float, cached: bool, **extra: Any) -> None:
        self.debug(
            "global_max_scan",
            global_max=global_max,
            cached=cached,
            **extra,
        )

    def geometry_built(
        self,
        duration_ms: float,
        vertices: int,
        triangles: int,
        **extra: Any,
    ) -> None:
        self.info(
            "geometry_built",
            f"Balloon geometry built in {duration_ms:.1f}ms",
            duration_ms=duration_ms,
            vertices=vertices,
            triangles=triangles,
            **extra,
        )

    def slices_computed(
        self,
        duration_ms: float,
        uses_on_axis: bool,
        **extra: Any,
    ) -> None:
        self.info(
            "slices_computed",
            f"Polar slices computed in {duration_ms:.1f}ms",
            duration_ms=duration_ms,
            uses_on_axis=uses_on_axis,
            **extra,
        )


_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Configure the package-wide structured logger."""
    global _global_logger

    if isinstance(level, str):
        level = LogLevel(level.lower())

    _global_logger = StructuredLogger(
        name="gll_balloon",
        level=level,
        output=output,
        json_format=json_format,
    )

    return _global_logger


def get_logger(name: str = "gll_balloon") -> StructuredLogger:
    """Get the package-wide logger, creating a default one if needed."""
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name)

    return _global_logger
