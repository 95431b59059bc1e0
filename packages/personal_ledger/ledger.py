"""Ledger commands: the mutation paths shared by the dashboard and the CLI.

Every command performs its storage calls in order, then reloads all records
and returns the fresh :class:`RecordManager`. Callers replace their snapshot
with the returned one; nothing here keeps or mutates a caller's snapshot.

Storage failures are fatal for the application. The gateway reports them as
failed outcomes and :class:`LedgerService` turns them into
:class:`FatalStorageError`, which entrypoints let terminate the process.

Ordering
--------
- insert: renumber → next id → insert → reload
- update: overwrite by id → reload (no renumbering)
- delete: delete by id → renumber → reload

Each step is its own transaction. A crash between steps can leave a gap in
the ids (delete without renumber), which the next insert repairs because it
renumbers first. The renumbering step itself cannot lose rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from .input_state import InsertRecord, Mutation, RecordDraft, UpdateRecord
from .logging_setup import get_logger
from .models import Record
from .persistence import PersistenceGateway, StorageOutcome
from .record_manager import RecordManager
from .sequencer import Sequencer

_logger = get_logger("personal_ledger.ledger")


class FatalStorageError(RuntimeError):
    """A storage operation failed; the application cannot continue."""


T = TypeVar("T")


def _unwrap(outcome: StorageOutcome[T]) -> T:
    if not outcome.ok:
        raise FatalStorageError(outcome.error or "storage operation failed")
    return outcome.value  # type: ignore[return-value]


class LedgerService:
    def __init__(self, gateway: PersistenceGateway, sequencer: Sequencer | None = None) -> None:
        self._gateway = gateway
        self._sequencer = sequencer or Sequencer(gateway)

    @property
    def gateway(self) -> PersistenceGateway:
        return self._gateway

    def load(self) -> RecordManager:
        return RecordManager(_unwrap(self._gateway.load_all()))

    def commit(self, mutation: Mutation, snapshot: RecordManager) -> RecordManager:
        """Apply a confirmed form mutation.

        ``UpdateRecord`` targets the record at ``index`` in ``snapshot``; an
        index outside the snapshot leaves storage untouched.
        """

        if isinstance(mutation, InsertRecord):
            return self.add(mutation.draft)
        if isinstance(mutation, UpdateRecord):
            records = snapshot.get_all()
            if not 0 <= mutation.index < len(records):
                _logger.debug("ledger:update_skipped index=%d", mutation.index)
                return self.load()
            return self.update(records[mutation.index].id, mutation.draft)
        raise TypeError(f"unsupported mutation: {mutation!r}")

    def add(self, draft: RecordDraft) -> RecordManager:
        _unwrap(self._sequencer.renumber())
        new_id = _unwrap(self._sequencer.next_id())
        _unwrap(self._gateway.insert(draft.to_record(new_id)))
        _logger.info("ledger:add id=%d direction=%s", new_id, draft.direction.value)
        return self.load()

    def update(self, record_id: int, draft: RecordDraft) -> RecordManager:
        _unwrap(self._gateway.update(draft.to_record(record_id)))
        _logger.info("ledger:update id=%d", record_id)
        return self.load()

    def delete(self, record: Record) -> RecordManager:
        _unwrap(self._gateway.delete(record.id))
        _unwrap(self._sequencer.renumber())
        _logger.info("ledger:delete id=%d", record.id)
        return self.load()

    def renumber(self) -> RecordManager:
        _unwrap(self._sequencer.renumber())
        return self.load()

    def seed(self, drafts: Iterable[RecordDraft]) -> RecordManager:
        """Append ``drafts`` under fresh sequential ids."""

        items = list(drafts)
        _unwrap(self._sequencer.renumber())
        next_id = _unwrap(self._sequencer.next_id())
        for offset, draft in enumerate(items):
            _unwrap(self._gateway.insert(draft.to_record(next_id + offset)))
        _logger.info("ledger:seed count=%d", len(items))
        return self.load()


__all__ = ["FatalStorageError", "LedgerService"]
