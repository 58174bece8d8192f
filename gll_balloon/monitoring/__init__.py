"""
Monitoring for gll_balloon.

Components:
    StructuredLogger - JSON structured event logging

Example:
    from gll_balloon.monitoring import configure_logging

    logger = configure_logging(level="debug", json_format=False)
"""

from gll_balloon.monitoring.logging import (
    StructuredLogger,
    LogLevel,
    LogRecord,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogRecord",
    "configure_logging",
    "get_logger",
]
