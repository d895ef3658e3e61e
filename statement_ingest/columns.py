"""Header-driven column mapping for delimited statements.

``map_columns`` assigns a zero-based column index to each semantic role
(date, description, amount, type) by keyword search over the header row.
Keywords are tried in priority order and the first header field *containing*
the keyword wins, so ``"Posted Date"`` satisfies ``"date"``.

``parse_mapped_rows`` then reads body rows through the mapping. The ``type``
role is recorded in the mapping only; amounts keep the sign they are written
with.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from .logging_setup import get_logger
from .models import FALLBACK_DESCRIPTION, ColumnMapping, ParsedTransaction
from .normalize import parse_amount, parse_date

DATE_KEYWORDS: tuple[str, ...] = (
    "date",
    "transaction date",
    "posted date",
    "value date",
    "trans date",
)
DESCRIPTION_KEYWORDS: tuple[str, ...] = (
    "description",
    "memo",
    "details",
    "narration",
    "payee",
    "merchant",
    "transaction",
    "particulars",
)
AMOUNT_KEYWORDS: tuple[str, ...] = (
    "amount",
    "value",
    "balance",
    "transaction amount",
    "debit",
    "credit",
)
TYPE_KEYWORDS: tuple[str, ...] = (
    "type",
    "transaction type",
    "debit/credit",
    "dr/cr",
)

_EDGE_QUOTE_RE = re.compile(r"^[\"']|[\"']$")

_logger = get_logger("statement_ingest.columns")


def split_fields(line: str, delimiter: str, *, unquote: bool = True) -> list[str]:
    """Split ``line`` on ``delimiter``, trimming each field.

    With ``unquote`` one leading and one trailing quote character (``"`` or
    ``'``) is removed from every field. Quoted delimiters are not honored.
    """

    fields = [part.strip() for part in line.split(delimiter)]
    if unquote:
        fields = [_EDGE_QUOTE_RE.sub("", f) for f in fields]
    return fields


def _find_index(lowered: Sequence[str], keywords: Sequence[str]) -> int | None:
    for keyword in keywords:
        for idx, field in enumerate(lowered):
            if keyword in field:
                return idx
    return None


def map_columns(header_fields: Sequence[str]) -> ColumnMapping:
    """Map header fields to semantic roles; unmatched roles are ``None``."""

    lowered = [h.strip().lower() for h in header_fields]
    mapping = ColumnMapping(
        date=_find_index(lowered, DATE_KEYWORDS),
        description=_find_index(lowered, DESCRIPTION_KEYWORDS),
        amount=_find_index(lowered, AMOUNT_KEYWORDS),
        type=_find_index(lowered, TYPE_KEYWORDS),
    )
    _logger.debug("column mapping for header %r: %s", list(header_fields), mapping)
    return mapping


def _cell(parts: Sequence[str], idx: int | None) -> str:
    if idx is None or idx >= len(parts):
        return ""
    return parts[idx]


def parse_mapped_row(
    line: str, mapping: ColumnMapping, delimiter: str
) -> ParsedTransaction | None:
    """Build a transaction from one body row, or ``None`` when it has no
    resolvable date or amount."""

    parts = split_fields(line, delimiter)

    date_str = parse_date(_cell(parts, mapping.date))
    if date_str is None:
        return None
    amount = parse_amount(_cell(parts, mapping.amount))
    if amount is None:
        return None

    description = _cell(parts, mapping.description)
    if not description:
        description = " ".join(
            part
            for idx, part in enumerate(parts)
            if idx not in (mapping.date, mapping.amount) and part
        ).strip()

    return ParsedTransaction(
        date=date_str,
        description=description or FALLBACK_DESCRIPTION,
        amount=amount,
    )


def parse_mapped_rows(
    rows: Iterable[str], mapping: ColumnMapping, delimiter: str
) -> list[ParsedTransaction]:
    """Parse every body row through ``mapping``; unusable rows are dropped."""

    out: list[ParsedTransaction] = []
    skipped = 0
    for line in rows:
        if not line.strip():
            continue
        tx = parse_mapped_row(line, mapping, delimiter)
        if tx is None:
            skipped += 1
            continue
        out.append(tx)
    if skipped:
        _logger.debug("skipped %d row(s) without a date or amount", skipped)
    return out


__all__ = [
    "AMOUNT_KEYWORDS",
    "DATE_KEYWORDS",
    "DESCRIPTION_KEYWORDS",
    "TYPE_KEYWORDS",
    "map_columns",
    "parse_mapped_row",
    "parse_mapped_rows",
    "split_fields",
]
