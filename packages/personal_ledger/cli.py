# ruff: noqa: I001
"""CLI for the ``personal_ledger`` package.

This module exposes callable command handlers (``cmd_*``) and a Typer-based
console interface. Configuration (notably ``DATABASE_URL``) is loaded once
from the environment and a local ``.env`` via ``python-dotenv`` before
delegating to command logic. Business logic lives in
``personal_ledger.ledger`` and related modules.

Every handler returns a process exit code: ``0`` on success, ``1`` on
configuration, import or storage errors (reported on stderr).
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from typer.models import OptionInfo

from .config import ConfigError, Settings
from .ledger import FatalStorageError, LedgerService
from .logging_setup import configure_logging, get_logger
from .models import Category
from .persistence import GatewayConfig, PersistenceGateway

_logger = get_logger("personal_ledger.cli")


# ---- Small module-level helpers used by CLI commands -------------------------


def _open_service(settings: Settings, *, create_schema: bool = False) -> LedgerService:
    """Build the gateway/service stack for ``settings``.

    Read-only commands leave ``create_schema`` off so a mistyped URL fails
    instead of creating an empty database. Commands that write create the
    ``records`` table first and raise ``FatalStorageError`` when that fails.
    """

    gateway = PersistenceGateway(GatewayConfig(database_url=settings.database_url))
    if create_schema:
        outcome = gateway.create_schema()
        if not outcome.ok:
            raise FatalStorageError(outcome.error or "create_schema failed")
    return LedgerService(gateway)


def _load_settings(database_url: str | None) -> Settings | None:
    try:
        return Settings.from_env(database_url=database_url)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def _report_fatal(e: FatalStorageError) -> int:
    _logger.error("cli:fatal_storage_error error=%s", e)
    print(f"Error: storage failure: {e}", file=sys.stderr)
    return 1


# ---- Command handlers --------------------------------------------------------


def cmd_run(*, database_url: str | None = None) -> int:
    """Start the full-screen dashboard and block until the user quits."""

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    # The dashboard owns the terminal; only errors reach stderr unless a log
    # file is configured.
    configure_logging(
        settings.log_level if settings.log_file else "ERROR",
        log_file=settings.log_file,
    )

    # Deferred import keeps prompt_toolkit out of the non-interactive commands.
    from .controller import LedgerController
    from .term_ui import run_dashboard

    try:
        controller = LedgerController(_open_service(settings, create_schema=True))
        controller.load()
        run_dashboard(controller)
    except FatalStorageError as e:
        return _report_fatal(e)
    return 0


def cmd_list(*, database_url: str | None = None) -> int:
    """Print one formatted line per record in storage order."""

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)
    try:
        manager = _open_service(settings).load()
    except FatalStorageError as e:
        return _report_fatal(e)

    if manager.is_empty():
        print("No records.")
        return 0
    for line in manager.format_all():
        print(line)
    return 0


def cmd_summary(*, database_url: str | None = None) -> int:
    """Print balance, income, expenses and per-category expense totals."""

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)
    try:
        manager = _open_service(settings).load()
    except FatalStorageError as e:
        return _report_fatal(e)

    print(f"{'Balance':<12} {manager.balance():>10.2f}")
    print(f"{'Income':<12} {manager.total_income():>10.2f}")
    print(f"{'Expenses':<12} {manager.total_expenses():>10.2f}")
    print()
    totals = manager.category_totals()
    for category in Category:
        print(f"{category.label:<12} {totals[category]:>10.2f}")
    return 0


def cmd_seed(*, database_url: str | None = None) -> int:
    """Append the demo records under fresh ids."""

    from .seeds import DEMO_RECORDS

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)
    try:
        manager = _open_service(settings, create_schema=True).seed(DEMO_RECORDS)
    except FatalStorageError as e:
        return _report_fatal(e)
    print(f"Seeded {len(DEMO_RECORDS)} records ({len(manager)} total).")
    return 0


def cmd_import(json_path: str, *, database_url: str | None = None) -> int:
    """Append records from a JSON file (see ``personal_ledger.seeds``)."""

    from .seeds import load_seed_file

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)

    try:
        drafts = load_seed_file(json_path)
    except FileNotFoundError:
        print(f"Error: File not found: {json_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {json_path}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: Invalid records file '{json_path}': {e}", file=sys.stderr)
        return 1

    try:
        manager = _open_service(settings, create_schema=True).seed(drafts)
    except FatalStorageError as e:
        return _report_fatal(e)
    print(f"Imported {len(drafts)} records ({len(manager)} total).")
    return 0


def cmd_renumber(*, database_url: str | None = None) -> int:
    """Rewrite stored ids to ``1..N``."""

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)
    try:
        manager = _open_service(settings, create_schema=True).renumber()
    except FatalStorageError as e:
        return _report_fatal(e)
    print(f"Renumbered {len(manager)} records.")
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    """Create the ``records`` table when it does not exist."""

    settings = _load_settings(database_url)
    if settings is None:
        return 1
    configure_logging(settings.log_level, log_file=settings.log_file)
    try:
        _open_service(settings, create_schema=True)
    except FatalStorageError as e:
        return _report_fatal(e)
    print("Database ready.")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Personal finance ledger: record income and expenses and review them in a "
        "terminal dashboard. Reads DATABASE_URL from the environment or a local .env."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
JSON_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--json-path",
    help="Path to a JSON array of records to import",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _url(ctx: typer.Context, database_url: str | None) -> str | None:
    # A per-command option wins over the global one.
    return database_url or (ctx.obj or {}).get("database_url")


@app.callback()
def _root(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    ctx.obj = {"database_url": database_url}


@app.command("run")
def run_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Open the interactive dashboard."""
    _exit(cmd_run(database_url=_url(ctx, database_url)))


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Print all records."""
    _exit(cmd_list(database_url=_url(ctx, database_url)))


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Print balance and totals."""
    _exit(cmd_summary(database_url=_url(ctx, database_url)))


@app.command("seed")
def seed_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Insert the demo records."""
    _exit(cmd_seed(database_url=_url(ctx, database_url)))


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    json_path: Annotated[Path, JSON_PATH_OPTION],
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Import records from a JSON file."""
    _exit(cmd_import(str(json_path), database_url=_url(ctx, database_url)))


@app.command("renumber")
def renumber_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Renumber record ids to 1..N."""
    _exit(cmd_renumber(database_url=_url(ctx, database_url)))


@app.command("init-db")
def init_db_cmd(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Create the records table."""
    _exit(cmd_init_db(database_url=_url(ctx, database_url)))


def main() -> None:  # pragma: no cover - console entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m personal_ledger.cli`
    app()
