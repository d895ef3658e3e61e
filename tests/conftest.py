"""Pytest configuration for test isolation.

Parser limits and the log level are read from the environment on every call.
A developer shell (or a local ``.env`` loaded by the CLI) may carry
``STATEMENT_INGEST_*`` overrides that would change parsing behavior between
machines, so each test starts from a clean slate.
"""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_statement_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop inherited ``STATEMENT_INGEST_*`` variables and quiet logging."""

    for name in list(os.environ):
        if name.startswith("STATEMENT_INGEST_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STATEMENT_INGEST_LOG_LEVEL", "WARNING")
