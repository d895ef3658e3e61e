"""Pattern-based transaction extraction for lines without a usable header.

Each line goes through two passes:

1. Structured split: the line is split on the delimiter and each field is
   tried as a date, then as an amount. The first field that parses as a date
   supplies the date and the first other field that parses as an amount
   supplies the amount.
2. Whole-line scan, only when pass 1 left the date or the amount unresolved.
   Date patterns are tried in order (ISO-like, numeric, month-name) and the
   first match that parses is taken. The amount is the *last* number-like
   token on the line once date substrings are removed: trailing tokens are
   more often the transaction amount than a leading reference number. Values
   found here replace the pass 1 values; pass 1 values survive only where
   the scan finds nothing.

The description is whatever remains after removing every date-like and
amount-like substring from the line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .columns import split_fields
from .logging_setup import get_logger
from .models import FALLBACK_DESCRIPTION, ParsedTransaction
from .normalize import MONTH_NAME, parse_amount, parse_date

# Ordered: ISO first so "2024-01-05" is never read as numeric "24-01-05".
DATE_SCAN_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?<!\d)\d{4}[-/]\d{1,2}[-/]\d{1,2}(?!\d)"),
    re.compile(r"(?<!\d)\d{1,2}[-/]\d{1,2}[-/](?:\d{4}|\d{2})(?!\d)"),
    re.compile(rf"\b\d{{1,2}}\s+{MONTH_NAME}\s+\d{{4}}\b", re.IGNORECASE),
    re.compile(rf"\b{MONTH_NAME}\s+\d{{1,2}},?\s+\d{{4}}\b", re.IGNORECASE),
)

AMOUNT_SCAN_PATTERN = re.compile(r"(?<![\w.])\(?-?[$€£¥]?\s?\(?-?\d[\d,]*(?:\.\d+)?\)?")

_QUOTES = "\"'"

_logger = get_logger("statement_ingest.tokens")


def _strip_dates(text: str) -> str:
    for pattern in DATE_SCAN_PATTERNS:
        text = pattern.sub(" ", text)
    return text


def scan_date(line: str) -> str | None:
    """Return the first date found anywhere in ``line`` (pattern order wins)."""

    for pattern in DATE_SCAN_PATTERNS:
        m = pattern.search(line)
        if m is None:
            continue
        parsed = parse_date(m.group(0))
        if parsed is not None:
            return parsed
    return None


def scan_amount(line: str) -> float | None:
    """Return the last amount-like token in ``line`` that parses."""

    residue = _strip_dates(line)
    for m in reversed(list(AMOUNT_SCAN_PATTERN.finditer(residue))):
        value = parse_amount(m.group(0))
        if value is not None:
            return value
    return None


def describe(line: str, delimiter: str) -> str:
    """Strip date and amount tokens from ``line`` and tidy what remains."""

    residue = AMOUNT_SCAN_PATTERN.sub(" ", _strip_dates(line))
    # Leftover delimiters and quotes are dropped too, not just outer whitespace.
    pieces = (
        " ".join(piece.strip().strip(_QUOTES).split()) for piece in residue.split(delimiter)
    )
    return " ".join(p for p in pieces if p).strip()


def extract_from_line(line: str, delimiter: str = ",") -> ParsedTransaction | None:
    """Extract a transaction from a single line, or ``None`` when the line
    lacks a date or an amount (headers, separators, totals without dates)."""

    date_str: str | None = None
    amount: float | None = None

    for part in split_fields(line, delimiter):
        if date_str is None:
            parsed_date = parse_date(part)
            if parsed_date is not None:
                date_str = parsed_date
                continue
        if amount is None:
            parsed_amount = parse_amount(part)
            if parsed_amount is not None:
                amount = parsed_amount
        if date_str is not None and amount is not None:
            break

    if date_str is None or amount is None:
        # The whole-line scan supersedes pass 1 where it finds something:
        # a bare year field ("2024") is otherwise taken as the amount.
        date_str = scan_date(line) or date_str
        scanned = scan_amount(line)
        if scanned is not None:
            amount = scanned

    if date_str is None or amount is None:
        return None

    return ParsedTransaction(
        date=date_str,
        description=describe(line, delimiter) or FALLBACK_DESCRIPTION,
        amount=amount,
    )


def extract_from_lines(lines: Iterable[str], delimiter: str = ",") -> list[ParsedTransaction]:
    out: list[ParsedTransaction] = []
    dropped = 0
    for line in lines:
        tx = extract_from_line(line, delimiter)
        if tx is None:
            dropped += 1
            continue
        out.append(tx)
    if dropped:
        _logger.debug("no transaction found in %d line(s)", dropped)
    return out


__all__ = [
    "AMOUNT_SCAN_PATTERN",
    "DATE_SCAN_PATTERNS",
    "describe",
    "extract_from_line",
    "extract_from_lines",
    "scan_amount",
    "scan_date",
]
