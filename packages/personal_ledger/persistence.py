# ruff: noqa: I001
"""Persistence gateway for ledger records.

Functions here read and write the ``records`` table owned by ``libs/db``. They
rely on the SQLAlchemy ORM model in ``db.models.ledger`` and sessions from
``db.client``; every call opens its own transactional scope and closes it
before returning.

Every gateway operation returns a :class:`StorageOutcome` instead of raising
or terminating the process. Database errors and rows that fall outside the
known vocabulary are logged and reported as failed outcomes; the application
layer (``personal_ledger.ledger``) decides that they are fatal.

Scope:
- Load all records (rows decoded into :class:`~personal_ledger.models.Record`).
- Insert / update / delete a single record by id.
- Rewrite all ids densely (``renumber_all``) inside one transaction.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db import Base
from db.client import get_engine, session_scope
from db.models.ledger import LedgerRecordRow
from .logging_setup import get_logger
from .models import (
    Record,
    UnknownTokenError,
    category_from_token,
    category_to_token,
    direction_from_token,
    direction_to_token,
    format_date,
    parse_date,
)

_logger = get_logger("personal_ledger.persistence")

T = TypeVar("T")


class RowDecodeError(ValueError):
    """A persisted row does not match the known vocabulary."""


@dataclass(frozen=True, slots=True)
class StorageOutcome(Generic[T]):
    """Result of one gateway call: ``value`` when ``ok``, otherwise ``error``."""

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> StorageOutcome[T]:
        return cls(True, value, None)

    @classmethod
    def failure(cls, error: str) -> StorageOutcome[T]:
        return cls(False, None, error)


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Connection settings captured once at startup."""

    database_url: str


# ---------------------------------------------------------------------------
# Row <-> Record mapping
# ---------------------------------------------------------------------------


def record_to_row_values(record: Record) -> dict[str, Any]:
    """Column values for ``record`` (no category is stored as ``"NONE"``)."""

    return {
        "id": record.id,
        "money_type": direction_to_token(record.direction),
        "amount": record.amount,
        "expense": category_to_token(record.category),
        "time": format_date(record.date),
    }


def row_to_record(row: LedgerRecordRow) -> Record:
    """Decode a persisted row; raises :class:`RowDecodeError` on unknown values."""

    if row.id is None:
        raise RowDecodeError("record row without id")
    try:
        direction = direction_from_token(row.money_type)
        category = category_from_token(row.expense) if row.expense is not None else None
    except UnknownTokenError as e:
        raise RowDecodeError(f"record {row.id}: {e}") from None
    try:
        when = parse_date(row.time)
    except (TypeError, ValueError):
        raise RowDecodeError(f"record {row.id}: unparseable date {row.time!r}") from None
    try:
        return Record(
            id=row.id,
            direction=direction,
            amount=row.amount,
            category=category,
            date=when,
        )
    except (TypeError, ValueError) as e:
        raise RowDecodeError(f"record {row.id}: {e}") from None


def _load_records(session: Session) -> list[Record]:
    rows = session.execute(select(LedgerRecordRow).order_by(LedgerRecordRow.id)).scalars().all()
    return [row_to_record(r) for r in rows]


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class PersistenceGateway:
    """Load/insert/update/delete/renumber operations against durable storage."""

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def _run(self, op: str, fn: Callable[[Session], T]) -> StorageOutcome[T]:
        try:
            with session_scope(database_url=self._config.database_url) as session:
                value = fn(session)
        except (SQLAlchemyError, RowDecodeError) as e:
            _logger.error("persistence:%s_failed error=%s", op, e)
            return StorageOutcome.failure(f"{op} failed: {e}")
        return StorageOutcome.success(value)

    def create_schema(self) -> StorageOutcome[None]:
        """Create the ``records`` table when it does not exist yet."""

        try:
            engine = get_engine(database_url=self._config.database_url)
            Base.metadata.create_all(bind=engine, tables=[LedgerRecordRow.__table__])
        except SQLAlchemyError as e:
            _logger.error("persistence:create_schema_failed error=%s", e)
            return StorageOutcome.failure(f"create_schema failed: {e}")
        return StorageOutcome.success(None)

    def load_all(self) -> StorageOutcome[list[Record]]:
        return self._run("load_all", _load_records)

    def count(self) -> StorageOutcome[int]:
        def _count(session: Session) -> int:
            return int(
                session.execute(select(func.count()).select_from(LedgerRecordRow)).scalar_one()
            )

        return self._run("count", _count)

    def insert(self, record: Record) -> StorageOutcome[int]:
        """Insert ``record`` under its own id; returns that id."""

        def _insert(session: Session) -> int:
            session.add(LedgerRecordRow(**record_to_row_values(record)))
            session.flush()
            return record.id

        outcome = self._run("insert", _insert)
        if outcome.ok:
            _logger.debug("persistence:insert id=%d", record.id)
        return outcome

    def update(self, record: Record) -> StorageOutcome[int]:
        """Overwrite the row with ``record.id``; returns the number of rows matched."""

        def _update(session: Session) -> int:
            values = record_to_row_values(record)
            values.pop("id")
            result = session.execute(
                update(LedgerRecordRow).where(LedgerRecordRow.id == record.id).values(**values)
            )
            return int(result.rowcount or 0)

        outcome = self._run("update", _update)
        if outcome.ok and not outcome.value:
            _logger.warning("persistence:update_missing id=%d", record.id)
        return outcome

    def delete(self, record_id: int) -> StorageOutcome[int]:
        """Delete the row with ``record_id``; returns the number of rows removed."""

        def _delete(session: Session) -> int:
            result = session.execute(
                delete(LedgerRecordRow).where(LedgerRecordRow.id == record_id)
            )
            return int(result.rowcount or 0)

        return self._run("delete", _delete)

    def renumber_all(self) -> StorageOutcome[int]:
        """Rewrite every row under ids ``1..N`` in load order.

        Loads all rows, deletes them by their current ids and re-inserts them
        sequentially. The whole rewrite is a single transaction: on any failure
        it rolls back and storage keeps its previous rows. Returns ``N``.
        """

        def _renumber(session: Session) -> int:
            records = _load_records(session)
            if not records:
                return 0
            # Rows are re-inserted below with new ids; drop the stale ORM copies.
            session.expunge_all()
            session.execute(
                delete(LedgerRecordRow).where(
                    LedgerRecordRow.id.in_([r.id for r in records])
                )
            )
            session.execute(
                insert(LedgerRecordRow),
                [
                    record_to_row_values(r.with_id(new_id))
                    for new_id, r in enumerate(records, start=1)
                ],
            )
            return len(records)

        return self._run("renumber_all", _renumber)


__all__ = [
    "GatewayConfig",
    "PersistenceGateway",
    "RowDecodeError",
    "StorageOutcome",
    "record_to_row_values",
    "row_to_record",
]
