"""Environment-driven limits for a single parse invocation.

The parser is a pure function over an in-memory string; these limits bound
the work done per upload. Values are read from the environment at call time
(``ParserLimits.from_env()``) so hosts can tune them without code changes:

- ``STATEMENT_INGEST_MAX_BYTES``: reject files larger than this many bytes.
- ``STATEMENT_INGEST_MAX_LINES``: ignore non-blank lines beyond this count.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_LINES = 50_000

MAX_BYTES_ENV_VAR = "STATEMENT_INGEST_MAX_BYTES"
MAX_LINES_ENV_VAR = "STATEMENT_INGEST_MAX_LINES"


def _env_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True, slots=True)
class ParserLimits:
    """Upper bounds applied before and during parsing."""

    max_bytes: int = DEFAULT_MAX_BYTES
    max_lines: int = DEFAULT_MAX_LINES

    @classmethod
    def from_env(cls) -> ParserLimits:
        return cls(
            max_bytes=_env_positive_int(MAX_BYTES_ENV_VAR, DEFAULT_MAX_BYTES),
            max_lines=_env_positive_int(MAX_LINES_ENV_VAR, DEFAULT_MAX_LINES),
        )


__all__ = [
    "DEFAULT_MAX_BYTES",
    "DEFAULT_MAX_LINES",
    "MAX_BYTES_ENV_VAR",
    "MAX_LINES_ENV_VAR",
    "ParserLimits",
]
