"""Data models for ``statement_ingest``.

Every object here is transient: created during a single parse invocation and
discarded once the transaction list is returned. Nothing is persisted.

Output record field order (exact, when serialized):
    - date: string (YYYY-MM-DD, no time component, no timezone)
    - description: string (never empty; ``"Bank transaction"`` fallback)
    - amount: float (positive = inflow, negative = outflow)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

FALLBACK_DESCRIPTION = "Bank transaction"

FORMAT_OFX = "OFX/QFX"
FORMAT_TEXT = "CSV/Text"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StatementFile:
    """An uploaded statement: raw content plus the name it was uploaded under.

    ``filename`` is used only for extension-based format hinting.
    """

    filename: str
    content: bytes | str

    @property
    def size(self) -> int:
        if isinstance(self.content, bytes):
            return len(self.content)
        return len(self.content.encode("utf-8"))

    def text(self) -> str:
        """Return the content as text.

        Bytes are decoded as UTF-8 with any byte-order mark removed;
        undecodable bytes are replaced rather than raising.
        """

        if isinstance(self.content, str):
            return self.content.removeprefix("\ufeff")
        return self.content.decode("utf-8-sig", errors="replace")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A single normalized transaction.

    ``date`` is always a valid calendar date in ``YYYY-MM-DD`` form and
    ``amount`` is always finite; records missing either are never built.
    """

    date: str
    description: str
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "description": self.description, "amount": self.amount}


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Deduplicated, date-sorted transactions plus the detected format label."""

    transactions: tuple[ParsedTransaction, ...]
    format: str

    @property
    def count(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "count": self.count,
            "format": self.format,
        }


# ---------------------------------------------------------------------------
# Intermediate (per-invocation) records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FormatDetection:
    is_ofx: bool

    @property
    def label(self) -> str:
        return FORMAT_OFX if self.is_ofx else FORMAT_TEXT


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    """Zero-based column index per semantic role; ``None`` means no such column."""

    date: int | None = None
    description: int | None = None
    amount: int | None = None
    type: int | None = None

    @property
    def has_anchor(self) -> bool:
        # Row-by-row mapping is only attempted when date or amount resolved.
        return self.date is not None or self.amount is not None


__all__ = [
    "FALLBACK_DESCRIPTION",
    "FORMAT_OFX",
    "FORMAT_TEXT",
    "ColumnMapping",
    "FormatDetection",
    "ParseResult",
    "ParsedTransaction",
    "StatementFile",
]
