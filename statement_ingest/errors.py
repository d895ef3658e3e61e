"""Exceptions raised for structurally unusable statement input.

Malformed *content* never raises: unparseable lines and blocks are dropped.
These errors cover only input that cannot be parsed at all (no file, an empty
file, or a file over the configured size limit).
"""

from __future__ import annotations


class StatementError(ValueError):
    """Base class for statement ingestion failures."""


class MissingFileError(StatementError):
    """No file was provided to the parser."""

    def __init__(self, message: str = "No file provided") -> None:
        super().__init__(message)


class EmptyStatementError(StatementError):
    """The file has no non-blank lines."""

    def __init__(self, message: str = "File is empty") -> None:
        super().__init__(message)


class StatementTooLargeError(StatementError):
    """The file exceeds ``ParserLimits.max_bytes``."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"File too large ({size} bytes, max {limit})")


__all__ = [
    "EmptyStatementError",
    "MissingFileError",
    "StatementError",
    "StatementTooLargeError",
]
