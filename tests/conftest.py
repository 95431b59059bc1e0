"""Pytest configuration for test isolation.

The application reads ``DATABASE_URL`` and the ``LEDGER_LOG_*`` variables from
the environment (and from a ``.env`` in the working directory). Tests must not
pick up a developer's real database, so an autouse fixture clears those
variables and runs every test from its own temporary directory.

Engines are cached per URL in ``db.client``; they are disposed after each test
so temporary SQLite files are not held open. Logging configuration is global
to the process and is reset the same way.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engines

from personal_ledger.ledger import LedgerService
from personal_ledger.logging_setup import reset_logging
from personal_ledger.persistence import GatewayConfig, PersistenceGateway
from tests.helpers.db import bootstrap_sqlite_db


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for var in ("DATABASE_URL", "LEDGER_LOG_LEVEL", "LEDGER_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    # No stray .env from the repository root.
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging()
    dispose_engines()


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "db" / "ledger.sqlite3")


@pytest.fixture()
def gateway(database_url: str) -> PersistenceGateway:
    return PersistenceGateway(GatewayConfig(database_url=database_url))


@pytest.fixture()
def service(gateway: PersistenceGateway) -> LedgerService:
    return LedgerService(gateway)
