"""Format, delimiter and header-row detection.

All three checks are heuristics over the filename or the first non-blank
line. None of them can fail; ambiguous input falls back to the defaults
(delimited text, comma, no header).
"""

from __future__ import annotations

from collections.abc import Sequence

from .logging_setup import get_logger
from .models import FormatDetection

OFX_EXTENSIONS: tuple[str, ...] = (".ofx", ".qfx")

# Candidate order matters: on a tie the earlier candidate is kept.
DELIMITER_CANDIDATES: tuple[str, ...] = (",", "\t", ";", "|")

HEADER_KEYWORDS: tuple[str, ...] = (
    "date",
    "description",
    "amount",
    "memo",
    "transaction",
    "balance",
)

_logger = get_logger("statement_ingest.detect")


def detect(filename: str | None, content: str = "") -> FormatDetection:
    """Classify a statement as OFX/QFX or delimited/plain text.

    Only the filename extension is consulted; ``content`` is accepted so the
    contract mirrors the upload (name plus body) but does not influence the
    outcome.
    """

    name = (filename or "").strip().lower()
    result = FormatDetection(is_ofx=name.endswith(OFX_EXTENSIONS))
    _logger.debug("detected format %s for filename=%r", result.label, filename)
    return result


def detect_delimiter(first_line: str) -> str:
    """Return the candidate delimiter occurring most often in ``first_line``."""

    best = ","
    best_count = 0
    for candidate in DELIMITER_CANDIDATES:
        count = first_line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def has_header_row(first_line_fields: Sequence[str]) -> bool:
    """True when any field contains a header keyword (case-insensitive).

    Substring matching means a data row whose free text contains e.g.
    ``"date"`` is also treated as a header.
    """

    return any(
        keyword in field.lower() for field in first_line_fields for keyword in HEADER_KEYWORDS
    )


__all__ = [
    "DELIMITER_CANDIDATES",
    "HEADER_KEYWORDS",
    "OFX_EXTENSIONS",
    "detect",
    "detect_delimiter",
    "has_header_row",
]
