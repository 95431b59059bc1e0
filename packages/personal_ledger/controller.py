"""UI-facing application state for the ledger dashboard.

:class:`LedgerController` holds everything the dashboard renders (snapshot,
focused widget, selection, form state, help flag, status line) and turns key
intents into state changes or ledger commands. It has no dependency on
prompt_toolkit so it can be exercised directly in tests.

Storage commands block, so they run on a single worker thread and are awaited
on the event loop. Only one command is in flight at a time: while ``busy`` is
set, further mutating intents are ignored. Each command returns a new
snapshot, which replaces the current one in a single assignment.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from functools import partial
from typing import TypeVar

from .input_state import InputStateMachine, InsertRecord, Mutation
from .ledger import LedgerService
from .logging_setup import get_logger
from .record_manager import RecordManager

_logger = get_logger("personal_ledger.controller")

R = TypeVar("R")


class FocusedWidget(Enum):
    RECORDS = "records"
    CATEGORY_CHART = "category_chart"
    BALANCE_CHART = "balance_chart"


_FOCUS_ORDER: tuple[FocusedWidget, ...] = (
    FocusedWidget.RECORDS,
    FocusedWidget.CATEGORY_CHART,
    FocusedWidget.BALANCE_CHART,
)


class LedgerController:
    def __init__(
        self,
        service: LedgerService,
        *,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._service = service
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ledger-db"
        )
        self.records = RecordManager()
        self.focus = FocusedWidget.RECORDS
        self.selected: int | None = None
        self.input = InputStateMachine()
        self.status = ""
        self.running = True
        self.busy = False

    # ---- snapshot --------------------------------------------------------------

    def load(self) -> None:
        """Synchronously load the initial snapshot (before the UI loop starts)."""
        self._replace(self._service.load())

    async def reload(self) -> None:
        self._replace(await self._offload(self._service.load))

    def _replace(self, snapshot: RecordManager) -> None:
        self.records = snapshot
        n = len(snapshot)
        if n == 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = min(self.selected, n - 1)

    async def _offload(self, fn: Callable[..., R], *args: object) -> R:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    # ---- focus and selection --------------------------------------------------

    def focus_next(self) -> None:
        i = _FOCUS_ORDER.index(self.focus)
        self.focus = _FOCUS_ORDER[(i + 1) % len(_FOCUS_ORDER)]

    def focus_previous(self) -> None:
        i = _FOCUS_ORDER.index(self.focus)
        self.focus = _FOCUS_ORDER[(i - 1) % len(_FOCUS_ORDER)]

    def select_next(self) -> None:
        n = len(self.records)
        if self.focus is not FocusedWidget.RECORDS or n == 0:
            return
        current = self.selected if self.selected is not None else 0
        self.selected = 0 if current >= n - 1 else current + 1

    def select_previous(self) -> None:
        n = len(self.records)
        if self.focus is not FocusedWidget.RECORDS or n == 0:
            return
        current = self.selected if self.selected is not None else 0
        self.selected = n - 1 if current <= 0 else current - 1

    # ---- form -------------------------------------------------------------------

    def begin_add(self) -> None:
        if self.focus is not FocusedWidget.RECORDS or self.busy:
            return
        self.status = ""
        self.input.begin_entry()

    def begin_edit(self) -> None:
        if self.focus is not FocusedWidget.RECORDS or self.busy:
            return
        records = self.records.get_all()
        if not records or self.selected is None or self.selected >= len(records):
            return
        self.status = ""
        self.input.begin_edit(records[self.selected])

    def type_char(self, char: str) -> None:
        self.input.append_char(char)

    def backspace(self) -> None:
        self.input.remove_char()

    def next_field(self) -> None:
        self.input.next_field()

    def previous_field(self) -> None:
        self.input.previous_field()

    def cancel_input(self) -> None:
        self.input.cancel()

    def submit(self) -> Mutation | None:
        """Close the open form and return the mutation to commit, if any.

        Validation failures are reported in ``status``. While a command is in
        flight the form stays open and nothing is returned.
        """

        if self.busy:
            return None
        result = self.input.confirm(self.selected)
        if result.error is not None:
            _logger.info("controller:confirm_rejected reason=%s", result.error)
            self.status = f"Error: wrong parameters ({result.error})"
        return result.mutation

    async def commit(self, mutation: Mutation) -> None:
        """Apply ``mutation``; storage failures propagate as ``FatalStorageError``."""

        if self.busy:
            return
        self.busy = True
        try:
            snapshot = await self._offload(self._service.commit, mutation, self.records)
        finally:
            self.busy = False
        self._replace(snapshot)
        self.status = "Record added" if isinstance(mutation, InsertRecord) else "Record updated"

    async def confirm(self) -> None:
        mutation = self.submit()
        if mutation is not None:
            await self.commit(mutation)

    async def delete_selected(self) -> None:
        if self.busy or self.focus is not FocusedWidget.RECORDS:
            return
        records = self.records.get_all()
        if self.selected is None or not 0 <= self.selected < len(records):
            return
        target = records[self.selected]

        self.busy = True
        try:
            snapshot = await self._offload(self._service.delete, target)
        finally:
            self.busy = False
        self._replace(snapshot)
        self.status = "Record deleted"

    # ---- misc -------------------------------------------------------------------

    def show_help(self) -> None:
        self.input.show_help()

    def hide_help(self) -> None:
        self.input.hide_help()

    def quit(self) -> None:
        self.running = False


__all__ = ["FocusedWidget", "LedgerController"]
