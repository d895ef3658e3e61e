"""OFX/QFX statement extraction.

OFX is SGML-like rather than strict XML, so no XML parser is involved. Each
``<STMTTRN>...</STMTTRN>`` block is located with a case-insensitive regex
and its fields are read independently. A field value may be spelled as

- ``<TAG>value</TAG>`` (OFX 2.x, XML style),
- ``<TAG>value`` (OFX 1.x SGML; the value runs to the next tag or line end),
- ``TAG:value`` on a line of its own (colon-separated exports).

Field precedence: date from ``DTPOSTED`` then ``DTUSER``; amount from
``TRNAMT``; description from ``MEMO`` then ``NAME``.
"""

from __future__ import annotations

import html
import re

from .logging_setup import get_logger
from .models import FALLBACK_DESCRIPTION, ParsedTransaction
from .normalize import parse_amount, parse_date

DATE_TAGS: tuple[str, ...] = ("DTPOSTED", "DTUSER")
AMOUNT_TAGS: tuple[str, ...] = ("TRNAMT",)
DESCRIPTION_TAGS: tuple[str, ...] = ("MEMO", "NAME")

_STMTTRN_RE = re.compile(r"<STMTTRN>(.*?)</STMTTRN>", re.IGNORECASE | re.DOTALL)


def _tag_patterns(tag: str) -> tuple[re.Pattern[str], ...]:
    return (
        re.compile(rf"<{tag}>(.*?)</{tag}>", re.IGNORECASE | re.DOTALL),
        re.compile(rf"<{tag}>([^<\r\n]*)", re.IGNORECASE),
        re.compile(rf"^[ \t]*{tag}[ \t]*:(.*)$", re.IGNORECASE | re.MULTILINE),
    )


_TAG_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    tag: _tag_patterns(tag) for tag in (*DATE_TAGS, *AMOUNT_TAGS, *DESCRIPTION_TAGS)
}

_logger = get_logger("statement_ingest.ofx")


def tag_value(block: str, tag: str) -> str | None:
    """Return the trimmed value of ``tag`` within ``block`` or ``None``."""

    patterns = _TAG_PATTERNS.get(tag.upper()) or _tag_patterns(tag)
    for pattern in patterns:
        m = pattern.search(block)
        if m is None:
            continue
        value = m.group(1).strip()
        if value:
            return html.unescape(value)
    return None


def _first_tag(block: str, tags: tuple[str, ...]) -> str | None:
    for tag in tags:
        value = tag_value(block, tag)
        if value is not None:
            return value
    return None


def ofx_date(raw: str) -> str | None:
    """Convert an OFX ``YYYYMMDD[hhmmss[.xxx][TZ]]`` value to ``YYYY-MM-DD``."""

    stamp = raw.strip()[:8]
    if len(stamp) != 8 or not stamp.isdigit():
        return None
    return parse_date(f"{stamp[:4]}-{stamp[4:6]}-{stamp[6:]}")


def parse_ofx_block(block: str) -> ParsedTransaction | None:
    raw_date = _first_tag(block, DATE_TAGS)
    raw_amount = _first_tag(block, AMOUNT_TAGS)
    if raw_date is None or raw_amount is None:
        return None

    date_str = ofx_date(raw_date)
    amount = parse_amount(raw_amount)
    if date_str is None or amount is None:
        return None

    return ParsedTransaction(
        date=date_str,
        description=_first_tag(block, DESCRIPTION_TAGS) or FALLBACK_DESCRIPTION,
        amount=amount,
    )


def parse_ofx(content: str) -> list[ParsedTransaction]:
    """Extract one transaction per resolvable ``STMTTRN`` block."""

    out: list[ParsedTransaction] = []
    blocks = 0
    for m in _STMTTRN_RE.finditer(content):
        blocks += 1
        tx = parse_ofx_block(m.group(1))
        if tx is not None:
            out.append(tx)
    _logger.debug("OFX: %d STMTTRN block(s), %d usable", blocks, len(out))
    return out


__all__ = [
    "AMOUNT_TAGS",
    "DATE_TAGS",
    "DESCRIPTION_TAGS",
    "ofx_date",
    "parse_ofx",
    "parse_ofx_block",
    "tag_value",
]
