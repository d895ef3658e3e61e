"""HTTP upload endpoint for statement parsing.

``POST /bank-statement/parse`` takes a multipart form with a single ``file``
field and responds with::

    {"transactions": [{"date", "description", "amount"}, ...],
     "count": <int>, "format": "OFX/QFX" | "CSV/Text"}

Error responses carry ``{"error": <message>}``: 400 for a missing or empty
file, 413 for a file over the size limit, 500 for anything unexpected. The
endpoint never writes anywhere; callers review the result and persist
transactions themselves.
"""

from __future__ import annotations

from fastapi import FastAPI, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import ParserLimits
from .errors import EmptyStatementError, MissingFileError, StatementTooLargeError
from .logging_setup import configure_logging, get_logger
from .parser import StatementParser

_logger = get_logger("statement_ingest.server")


class TransactionOut(BaseModel):
    date: str
    description: str
    amount: float


class ParseResponse(BaseModel):
    transactions: list[TransactionOut]
    count: int
    format: str


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(limits: ParserLimits | None = None) -> FastAPI:
    """Build the FastAPI application.

    ``limits`` pins the parser's size bounds; when ``None`` they are read
    from the environment per request. Package logging is configured here
    (once per process) so ``uvicorn statement_ingest.server:app`` logs the
    same way as ``statement-ingest serve``.
    """

    configure_logging()
    app = FastAPI(title="Statement Ingest", version="0.1.0")
    parser = StatementParser(limits)

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    @app.post("/bank-statement/parse", response_model=ParseResponse)
    async def parse_bank_statement(file: UploadFile | None = File(None)):  # noqa: B008
        if file is None:
            return _error(str(MissingFileError()), 400)

        content = await file.read()
        try:
            # CPU-bound; runs in a worker thread.
            result = await run_in_threadpool(parser.parse, file.filename, content)
        except (MissingFileError, EmptyStatementError) as e:
            return _error(str(e), 400)
        except StatementTooLargeError as e:
            return _error(str(e), 413)
        except Exception as e:
            _logger.exception("statement parse failed for %s", file.filename)
            return _error(str(e), 500)

        return result.to_dict()

    return app


app = create_app()


__all__ = ["ParseResponse", "TransactionOut", "app", "create_app"]
