"""Public interface for the ``statement_ingest`` package.

This module re-exports the package's parsing entrypoints, stage functions and
models as the stable import surface. There is no runtime logic here.
"""

from .columns import map_columns, parse_mapped_rows
from .config import ParserLimits
from .detect import detect, detect_delimiter, has_header_row
from .errors import (
    EmptyStatementError,
    MissingFileError,
    StatementError,
    StatementTooLargeError,
)
from .models import (
    FALLBACK_DESCRIPTION,
    FORMAT_OFX,
    FORMAT_TEXT,
    ColumnMapping,
    FormatDetection,
    ParsedTransaction,
    ParseResult,
    StatementFile,
)
from .normalize import normalize, parse_amount, parse_date
from .ofx import parse_ofx
from .parser import StatementParser, parse_statement
from .tokens import extract_from_line, extract_from_lines

__all__ = [
    # Pipeline
    "StatementParser",
    "parse_statement",
    # Stages
    "detect",
    "detect_delimiter",
    "has_header_row",
    "map_columns",
    "parse_mapped_rows",
    "extract_from_line",
    "extract_from_lines",
    "parse_date",
    "parse_amount",
    "normalize",
    "parse_ofx",
    # Models / constants
    "ColumnMapping",
    "FormatDetection",
    "ParsedTransaction",
    "ParseResult",
    "StatementFile",
    "FALLBACK_DESCRIPTION",
    "FORMAT_OFX",
    "FORMAT_TEXT",
    # Config / errors
    "ParserLimits",
    "StatementError",
    "MissingFileError",
    "EmptyStatementError",
    "StatementTooLargeError",
]
