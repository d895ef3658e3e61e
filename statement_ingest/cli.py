"""CLI for the ``statement_ingest`` package.

This module exposes callable command handlers (``cmd_parse``, ``cmd_serve``)
and a Typer-based console interface. Environment variables (parser limits,
log level) are loaded from a local ``.env`` using ``python-dotenv`` before
delegating to command logic. Parsing lives in ``statement_ingest.parser``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo

from .errors import StatementError
from .logging_setup import configure_logging
from .models import ParseResult

OUTPUT_FORMATS = ("json", "tsv")


def _render(result: ParseResult, output_format: str) -> str:
    if output_format == "tsv":
        return "\n".join(
            f"{t.date}\t{t.amount:.2f}\t{t.description}" for t in result.transactions
        )
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def cmd_parse(path: str, *, output_format: str = "json") -> int:
    """Parse a statement file and print the result to stdout.

    Output is the JSON response shape by default, or one
    ``date<TAB>amount<TAB>description`` line per transaction with
    ``output_format="tsv"``. Errors are written to stderr and the function
    returns a non-zero exit status. A parse that finds zero transactions still
    succeeds; a note is written to stderr so the user can try another file.
    """

    from .parser import parse_statement

    if output_format not in OUTPUT_FORMATS:
        print(
            f"Error: unknown output format {output_format!r} "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})",
            file=sys.stderr,
        )
        return 1

    p = Path(path)
    try:
        content = p.read_bytes()
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {path}", file=sys.stderr)
        return 1
    except IsADirectoryError:
        print(f"Error: Not a file: {path}", file=sys.stderr)
        return 1

    try:
        result = parse_statement(p.name, content)
    except StatementError as e:
        print(f"Error: {e}: {path}", file=sys.stderr)
        return 1

    if result.count == 0:
        print(
            "No transactions found; the file layout was not recognized.",
            file=sys.stderr,
        )
    rendered = _render(result, output_format)
    if rendered:
        print(rendered)
    return 0


def cmd_serve(*, host: str = "127.0.0.1", port: int = 8000) -> int:
    """Run the HTTP upload endpoint with uvicorn (blocks until stopped)."""

    import uvicorn

    from .server import create_app

    uvicorn.run(create_app(), host=host, port=port)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract transactions from bank statements (CSV, TSV, OFX/QFX or plain "
        "text). Loads settings from a local .env before running."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
STATEMENT_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to the statement file (.csv, .tsv, .txt, .ofx, .qfx).",
    exists=False,  # cmd_parse reports missing files and directories itself
)


@app.command("parse")
def parse_cmd(
    path: Annotated[Path, STATEMENT_PATH_ARGUMENT],
    *,
    output_format: str = typer.Option(
        "json", "--format", "-f", help="Output format: json or tsv."
    ),
) -> None:
    """Parse a statement and print the extracted transactions."""

    raise typer.Exit(cmd_parse(str(path), output_format=output_format))


@app.command("serve")
def serve_cmd(
    *,
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    """Serve POST /bank-statement/parse over HTTP."""

    raise typer.Exit(cmd_serve(host=host, port=port))


@app.callback()
def _root(
    *,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (falls back to STATEMENT_INGEST_LOG_LEVEL, then INFO).",
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()
