"""Process configuration, read once at startup.

``Settings.from_env()`` loads a local ``.env`` (without overriding variables
that are already set) and captures the values the application needs. The
resulting object is frozen and passed explicitly to the components that need
it; nothing downstream reads the environment again.

Variables
---------
- ``DATABASE_URL`` (required): SQLAlchemy URL of the ledger database, e.g.
  ``sqlite+pysqlite:///ledger.db``.
- ``LEDGER_LOG_LEVEL``: logging level name or number (default ``INFO``).
- ``LEDGER_LOG_FILE``: when set, logs are written to this file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str
    log_level: str | None = None
    log_file: Path | None = None

    @classmethod
    def from_env(
        cls,
        *,
        database_url: str | None = None,
        dotenv_path: str | Path | None = None,
    ) -> Settings:
        """Build settings from the environment.

        ``database_url`` overrides ``DATABASE_URL`` (CLI ``--database-url``).
        """

        load_dotenv(dotenv_path=dotenv_path or (Path.cwd() / ".env"), override=False)

        url = (database_url or os.getenv("DATABASE_URL") or "").strip()
        if not url:
            raise ConfigError(
                "DATABASE_URL is not set; pass --database-url or define it in the environment"
            )
        log_level = (os.getenv("LEDGER_LOG_LEVEL") or "").strip() or None
        log_file_raw = (os.getenv("LEDGER_LOG_FILE") or "").strip()
        return cls(
            database_url=url,
            log_level=log_level,
            log_file=Path(log_file_raw) if log_file_raw else None,
        )


__all__ = ["ConfigError", "Settings"]
