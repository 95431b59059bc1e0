"""Logging for the ledger: one handler on the ``personal_ledger`` logger.

Entrypoints call ``configure_logging`` once when the process starts. Every
other module asks ``get_logger`` for ``personal_ledger.<module>`` and never
installs handlers itself, so the CLI decides where records end up.

While the dashboard runs it draws over the whole terminal. Pass ``log_file``
in that case so log lines land in a file and do not corrupt the screen.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO

_PKG_LOGGER_NAME = "personal_ledger"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        # "10" or "debug" both work.
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    # LEDGER_LOG_LEVEL applies only when no level was passed.
    env_val = os.getenv("LEDGER_LOG_LEVEL")
    if env_val and level is None:
        return _parse_level(env_val)
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
    log_file: str | Path | None = None,
) -> None:
    """Install the package handler; later calls are no-ops until ``reset_logging``.

    ``level`` takes an int or a level name and falls back to ``LEDGER_LOG_LEVEL``
    and then INFO. ``fmt`` overrides the default
    ``"%(asctime)s %(name)s %(levelname)s %(message)s"`` layout. Records are
    written to ``stream`` unless ``log_file`` names a file to append to.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # Placeholders from get_logger go away once a real handler exists.
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(os.fspath(log_file), encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream)
    handler.setLevel(_parse_level(level))
    formatter = logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    # The root logger would print every record a second time.
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Detach configured handlers so ``configure_logging`` can run again."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``.

    Before ``configure_logging`` runs, the package logger gets a ``NullHandler``
    so that importing the library prints nothing.
    """

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
