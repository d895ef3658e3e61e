"""Date and amount canonicalization plus the final dedup/sort pass.

Dates
-----
``parse_date`` tries an ordered table of ``(pattern, extractor)`` pairs and
returns the first result that is a real calendar date, as ``YYYY-MM-DD``:

1. ISO-like ``YYYY-M-D`` (dash or slash).
2. Numeric ``D-M-YY`` / ``D-M-YYYY`` (dash or slash). When the first number
   is greater than 12 it is read as ``DD/MM``; otherwise ``MM/DD`` (US
   default). Two-digit years are prefixed with ``20``. The tie-break is lossy
   for DD/MM locales when the day is 12 or less.
3. ``D MonthName YYYY`` and ``MonthName D, YYYY`` (case-insensitive, matched
   on the first three letters of the month name).

Amounts
-------
``parse_amount`` strips ``$ € £ ¥``, thousands commas and whitespace, treats a
parenthesized or minus-prefixed value as negative, and requires the residue
to be a plain decimal number.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable
from datetime import date

from .logging_setup import get_logger
from .models import ParsedTransaction

DUPLICATE_AMOUNT_TOLERANCE = 0.01

MONTHS: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

MONTH_NAME = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"

_logger = get_logger("statement_ingest.normalize")

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_YMD = tuple[int, int, int]

_SEPARATOR_RUN_RE = re.compile(r"[,\s]+")


def _ymd_from_iso(m: re.Match[str]) -> _YMD | None:
    return int(m["year"]), int(m["month"]), int(m["day"])


def _ymd_from_numeric(m: re.Match[str]) -> _YMD | None:
    first, second, year = int(m["first"]), int(m["second"]), m["year"]
    if len(year) == 2:
        year = "20" + year
    if first > 12:
        # Cannot be a month: DD/MM.
        return int(year), second, first
    return int(year), first, second


def _ymd_from_month_name(m: re.Match[str]) -> _YMD | None:
    month = MONTHS.get(m["month"][:3].lower())
    if month is None:
        return None
    return int(m["year"]), month, int(m["day"])


DATE_PARSERS: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], _YMD | None]], ...] = (
    (
        re.compile(r"^(?P<year>\d{4})[-/](?P<month>\d{1,2})[-/](?P<day>\d{1,2})$"),
        _ymd_from_iso,
    ),
    (
        re.compile(r"^(?P<first>\d{1,2})[-/](?P<second>\d{1,2})[-/](?P<year>\d{4}|\d{2})$"),
        _ymd_from_numeric,
    ),
    (
        re.compile(
            rf"\b(?P<day>\d{{1,2}})\s+(?P<month>{MONTH_NAME})\s+(?P<year>\d{{4}})\b",
            re.IGNORECASE,
        ),
        _ymd_from_month_name,
    ),
    (
        re.compile(
            rf"\b(?P<month>{MONTH_NAME})\s+(?P<day>\d{{1,2}})\s+(?P<year>\d{{4}})\b",
            re.IGNORECASE,
        ),
        _ymd_from_month_name,
    ),
)


def _to_iso(ymd: _YMD) -> str | None:
    try:
        return date(*ymd).isoformat()
    except ValueError:
        return None


def parse_date(raw: str | None) -> str | None:
    """Return ``raw`` as a ``YYYY-MM-DD`` string, or ``None`` when unparseable."""

    if not raw:
        return None
    # Commas collapse to spaces, so "Jan 15, 2024" becomes "Jan 15 2024".
    cleaned = _SEPARATOR_RUN_RE.sub(" ", raw).strip()
    if not cleaned:
        return None
    for pattern, extract in DATE_PARSERS:
        m = pattern.search(cleaned)
        if m is None:
            continue
        ymd = extract(m)
        if ymd is not None:
            # A matching but impossible date (e.g. 2024-02-30) is not retried
            # against later patterns; none of them would accept it either.
            return _to_iso(ymd)
    return None


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_AMOUNT_NOISE_RE = re.compile(r"[$€£¥,\s]")
_PLAIN_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(raw: str | None) -> float | None:
    """Return ``raw`` as a signed float, or ``None`` when it is not a number.

    Examples: ``"($1,234.56)"`` -> ``-1234.56``; ``"$1,234.56"`` -> ``1234.56``;
    ``"-4.50"`` -> ``-4.5``; ``"+10"`` -> ``10.0``; ``"Coffee"`` -> ``None``.
    """

    if not raw:
        return None
    cleaned = _AMOUNT_NOISE_RE.sub("", raw)
    if not cleaned:
        return None
    negative = "(" in cleaned or cleaned.startswith("-")
    numeric = cleaned.replace("(", "").replace(")", "")
    if negative and numeric.startswith("-"):
        numeric = numeric[1:]
    if not _PLAIN_NUMBER_RE.fullmatch(numeric):
        return None
    value = float(numeric)
    if not math.isfinite(value):
        return None
    return -abs(value) if negative else value


# ---------------------------------------------------------------------------
# Dedup + sort
# ---------------------------------------------------------------------------


def is_duplicate(a: ParsedTransaction, b: ParsedTransaction) -> bool:
    return (
        a.date == b.date
        and a.description == b.description
        and abs(a.amount - b.amount) < DUPLICATE_AMOUNT_TOLERANCE
    )


def normalize(transactions: Iterable[ParsedTransaction]) -> list[ParsedTransaction]:
    """Drop duplicates (first occurrence wins) and sort ascending by date.

    Two records are duplicates when date and description are equal and the
    amounts differ by less than one cent. The sort is stable, so records on
    the same date keep their input order.
    """

    kept: list[ParsedTransaction] = []
    # Bucketed by (date, description) so only same-day, same-text records
    # are compared on amount.
    buckets: dict[tuple[str, str], list[ParsedTransaction]] = {}
    dropped = 0
    for tx in transactions:
        bucket = buckets.setdefault((tx.date, tx.description), [])
        if any(is_duplicate(seen, tx) for seen in bucket):
            dropped += 1
            continue
        bucket.append(tx)
        kept.append(tx)

    if dropped:
        _logger.debug("dropped %d duplicate transaction(s)", dropped)

    # Zero-padded ISO dates sort lexically in chronological order.
    kept.sort(key=lambda t: t.date)
    return kept


__all__ = [
    "DATE_PARSERS",
    "DUPLICATE_AMOUNT_TOLERANCE",
    "MONTHS",
    "MONTH_NAME",
    "is_duplicate",
    "normalize",
    "parse_amount",
    "parse_date",
]
