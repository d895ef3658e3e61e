"""Statement parsing pipeline: file in, normalized transactions out.

Control flow::

    bytes/text ──> detect ──┬─ OFX/QFX ──> parse_ofx ─────────────────┐
                            └─ CSV/Text ─┬─ header ──> map_columns ──> │
                                         │            parse_mapped_rows├─> normalize
                                         └─ no header / no anchor ──>  │
                                                      extract_from_lines┘

The pipeline is pure and synchronous; it keeps no state between calls.
Malformed lines never raise. Only missing, empty or oversized input does
(see :mod:`statement_ingest.errors`).
"""

from __future__ import annotations

import re

from .columns import map_columns, parse_mapped_rows, split_fields
from .config import ParserLimits
from .detect import detect, detect_delimiter, has_header_row
from .errors import EmptyStatementError, MissingFileError, StatementTooLargeError
from .logging_setup import get_logger
from .models import ParsedTransaction, ParseResult, StatementFile
from .normalize import normalize
from .ofx import parse_ofx
from .tokens import extract_from_lines

_LINE_BREAK_RE = re.compile(r"\r?\n")

_logger = get_logger("statement_ingest.parser")


def _non_blank_lines(text: str, max_lines: int) -> list[str]:
    lines = [line for line in _LINE_BREAK_RE.split(text) if line.strip()]
    if len(lines) > max_lines:
        _logger.warning(
            "statement has %d non-blank lines; only the first %d are parsed",
            len(lines),
            max_lines,
        )
        lines = lines[:max_lines]
    return lines


def parse_delimited(lines: list[str]) -> list[ParsedTransaction]:
    """Parse the non-blank lines of a CSV/TSV/plain-text statement."""

    delimiter = detect_delimiter(lines[0])
    first_fields = split_fields(lines[0], delimiter, unquote=False)
    header = has_header_row(first_fields) and len(first_fields) > 1
    _logger.debug("delimiter=%r header=%s", delimiter, header)

    if header:
        mapping = map_columns(first_fields)
        if mapping.has_anchor:
            return parse_mapped_rows(lines[1:], mapping, delimiter)
        _logger.info("header row maps neither date nor amount; scanning lines instead")
        return extract_from_lines(lines[1:], delimiter)

    return extract_from_lines(lines, delimiter)


class StatementParser:
    """Parse uploaded bank statements into normalized transactions.

    Parameters
    ----------
    limits:
        Size bounds for a single file. When ``None``, they are read from the
        environment on every call (see :class:`statement_ingest.config.ParserLimits`).
    """

    def __init__(self, limits: ParserLimits | None = None) -> None:
        self._limits = limits

    @property
    def limits(self) -> ParserLimits:
        return self._limits if self._limits is not None else ParserLimits.from_env()

    def parse_file(self, statement: StatementFile) -> ParseResult:
        limits = self.limits
        if statement.size > limits.max_bytes:
            raise StatementTooLargeError(statement.size, limits.max_bytes)

        text = statement.text()
        detection = detect(statement.filename, text)

        if detection.is_ofx:
            if not text.strip():
                raise EmptyStatementError()
            transactions = parse_ofx(text)
        else:
            lines = _non_blank_lines(text, limits.max_lines)
            if not lines:
                raise EmptyStatementError()
            transactions = parse_delimited(lines)

        result = ParseResult(transactions=tuple(normalize(transactions)), format=detection.label)
        _logger.info(
            "parsed %s as %s: %d transaction(s)", statement.filename, result.format, result.count
        )
        return result

    def parse(self, filename: str | None, content: bytes | str | None) -> ParseResult:
        """Parse ``content`` uploaded as ``filename``.

        Raises
        ------
        MissingFileError
            ``content`` is ``None``.
        EmptyStatementError
            The file has no non-blank lines.
        StatementTooLargeError
            The file exceeds ``limits.max_bytes``.
        """

        if content is None:
            raise MissingFileError()
        return self.parse_file(StatementFile(filename=filename or "", content=content))


def parse_statement(
    filename: str | None,
    content: bytes | str | None,
    *,
    limits: ParserLimits | None = None,
) -> ParseResult:
    """Module-level convenience for :meth:`StatementParser.parse`."""

    return StatementParser(limits).parse(filename, content)


__all__ = ["StatementParser", "parse_delimited", "parse_statement"]
