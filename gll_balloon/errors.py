"""
Balloon Errors - Domain-specific error types.

Error hierarchy:
    BalloonError (base)
    ├── SourceFormatError
    └── InvalidBuildOptions (also a ValueError)

Missing directivity data is NOT an error. Grid resolution, response
lookups and geometry builds return None for "no data" so that a partially
measured sphere still renders. These exceptions are reserved for input that
is structurally wrong.
"""

from __future__ import annotations

from typing import Any


class BalloonError(Exception):
    """Base error for all balloon-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SourceFormatError(BalloonError):
    """
    Raised when a parsed GLL source cannot be mapped to the canonical schema.

    Examples:
    - Responses is not a list
    - A level array contains non-numeric values
    - Symmetry code is not an integer
    """

    def __init__(
        self,
        field_name: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"{field_name}: {message}", details)
        self.field_name = field_name


class InvalidBuildOptions(BalloonError, ValueError):
    """
    Raised for geometry or engine options outside their valid range.

    Examples:
    - db_range <= 0 (would divide by zero during normalization)
    - scale <= 0
    - negative frequency index
    """

    def __init__(
        self,
        option: str,
        value: Any,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        msg = message or f"Invalid value for {option}: {value!r}"
        super().__init__(msg, details)
        self.option = option
        self.value = value
