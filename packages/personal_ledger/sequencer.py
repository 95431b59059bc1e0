"""Record id renumbering.

Record ids are kept dense: for ``N`` stored records the ids are exactly
``{1, ..., N}`` after every renumbering pass. Deletes leave gaps, so the delete
path renumbers afterwards, and the insert path renumbers first so that
:meth:`Sequencer.next_id` (``count + 1``) cannot collide with an existing id.

Storage is the source of truth: both operations read the persisted rows, never
an in-memory snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable

from .logging_setup import get_logger
from .models import Record
from .persistence import PersistenceGateway, StorageOutcome

_logger = get_logger("personal_ledger.sequencer")


def is_dense(records: Iterable[Record]) -> bool:
    """True when the ids of ``records`` are exactly ``1..N`` without duplicates."""

    ids = [r.id for r in records]
    return sorted(ids) == list(range(1, len(ids) + 1))


class Sequencer:
    def __init__(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def renumber(self) -> StorageOutcome[int]:
        """Rewrite stored ids to ``1..N`` in load order; no-op for an empty table."""

        outcome = self._gateway.renumber_all()
        if outcome.ok:
            _logger.info("sequencer:renumber count=%d", outcome.value or 0)
        return outcome

    def next_id(self) -> StorageOutcome[int]:
        """Next free id, ``count + 1``. Only valid while ids are dense."""

        outcome = self._gateway.count()
        if not outcome.ok:
            return StorageOutcome.failure(outcome.error or "count failed")
        return StorageOutcome.success((outcome.value or 0) + 1)


__all__ = ["Sequencer", "is_dense"]
