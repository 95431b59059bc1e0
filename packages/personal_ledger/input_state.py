"""Multi-field text entry for adding and editing records.

The machine gathers four free-text fields (amount, sign, category, date),
validates them on confirm and turns them into a mutation for the ledger
service to commit. It performs no I/O itself, so the terminal UI and tests
drive it the same way.

States
------
- ``IDLE``: no form open.
- ``ENTERING``: fresh-record form, buffers start empty.
- ``EDITING``: update form, buffers pre-filled from the selected record.

The help overlay is a separate flag that can be toggled in any state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TypeAlias

from .models import (
    FLOAT32_MAX,
    Category,
    Direction,
    Record,
    UnknownTokenError,
    category_from_token,
    category_to_token,
    format_date,
    parse_date,
)

FIELD_COUNT = 4
AMOUNT, SIGN, CATEGORY, DATE = range(FIELD_COUNT)

FIELD_TITLES: tuple[str, ...] = (
    "Amount",
    "Type (+/-)",
    "Category (" + ", ".join(c.value for c in Category) + " or NONE)",
    "Date (DD.MM.YYYY)",
)


class InputMode(Enum):
    IDLE = "idle"
    ENTERING = "entering"
    EDITING = "editing"


@dataclass(frozen=True, slots=True)
class RecordDraft:
    """Validated field values of a record that has no id yet."""

    direction: Direction
    amount: float
    category: Category | None
    date: date

    def to_record(self, record_id: int) -> Record:
        return Record(
            id=record_id,
            direction=self.direction,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )


@dataclass(frozen=True, slots=True)
class Validation:
    ok: bool
    draft: RecordDraft | None = None
    reason: str | None = None


@dataclass(frozen=True, slots=True)
class InsertRecord:
    draft: RecordDraft


@dataclass(frozen=True, slots=True)
class UpdateRecord:
    # Position in the current snapshot, not a record id.
    index: int
    draft: RecordDraft


Mutation: TypeAlias = InsertRecord | UpdateRecord


@dataclass(frozen=True, slots=True)
class ConfirmResult:
    """Outcome of :meth:`InputStateMachine.confirm`.

    Exactly one of ``mutation`` / ``error`` is set, or neither when the
    confirm was a no-op (nothing open, or nothing selected to edit).
    """

    mutation: Mutation | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.mutation is not None


# ---------------------------------------------------------------------------
# Field conversions
# ---------------------------------------------------------------------------


def record_to_edit_mode(record: Record) -> list[str]:
    """Buffers that pre-fill the edit form for ``record``."""

    return [
        f"{record.amount:.2f}",
        record.direction.sign,
        category_to_token(record.category),
        format_date(record.date),
    ]


def _parse_amount(text: str) -> float | None:
    # float() accepts digit separators ("1_000"); plain decimals only here.
    if "_" in text:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0 or value > FLOAT32_MAX:
        return None
    # Cents, as shown in the list and the edit form; "-0" becomes 0.0.
    return round(value, 2) + 0.0


def validate_input(buffers: list[str] | tuple[str, ...]) -> Validation:
    """Validate the four raw field strings into a :class:`RecordDraft`.

    Rules
    -----
    - amount: trimmed decimal number, finite and non-negative.
    - sign: trimmed ``+`` (income) or ``-`` (expense).
    - category: trimmed token, case-sensitive; unknown text falls back to
      no category instead of failing.
    - date: trimmed ``DD.MM.YYYY``.
    """

    if len(buffers) != FIELD_COUNT:
        return Validation(False, reason=f"Expected {FIELD_COUNT} fields, got {len(buffers)}")

    amount = _parse_amount(buffers[AMOUNT])
    if amount is None:
        return Validation(False, reason="Amount must be a non-negative number")

    sign = buffers[SIGN].strip()
    if sign == "+":
        direction = Direction.INCOME
    elif sign == "-":
        direction = Direction.EXPENSE
    else:
        return Validation(False, reason="Type must be '+' or '-'")

    try:
        category = category_from_token(buffers[CATEGORY].strip())
    except UnknownTokenError:
        category = None

    try:
        when = parse_date(buffers[DATE].strip())
    except ValueError:
        return Validation(False, reason="Date must be DD.MM.YYYY")

    return Validation(True, RecordDraft(direction, amount, category, when))


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class InputStateMachine:
    def __init__(self) -> None:
        self.mode = InputMode.IDLE
        self.buffers: list[str] = [""] * FIELD_COUNT
        self.cursor = 0
        self.help_visible = False

    @property
    def active(self) -> bool:
        return self.mode is not InputMode.IDLE

    def begin_entry(self) -> None:
        if self.active:
            return
        self._reset()
        self.mode = InputMode.ENTERING

    def begin_edit(self, record: Record) -> None:
        if self.active:
            return
        self._reset()
        self.buffers = record_to_edit_mode(record)
        self.mode = InputMode.EDITING

    def append_char(self, char: str) -> None:
        if self.active:
            self.buffers[self.cursor] += char

    def remove_char(self) -> None:
        if self.active:
            self.buffers[self.cursor] = self.buffers[self.cursor][:-1]

    def next_field(self) -> None:
        self.cursor = (self.cursor + 1) % FIELD_COUNT

    def previous_field(self) -> None:
        self.cursor = (self.cursor - 1) % FIELD_COUNT

    def cancel(self) -> None:
        self._reset()

    def confirm(self, selected_index: int | None = None) -> ConfirmResult:
        """Validate the buffers and close the form.

        The form closes (buffers cleared) whether or not validation succeeds;
        on failure the reason is returned for the caller to display.
        """

        mode = self.mode
        buffers = list(self.buffers)
        self._reset()

        if mode is InputMode.IDLE:
            return ConfirmResult()
        if mode is InputMode.EDITING and selected_index is None:
            return ConfirmResult()

        v = validate_input(buffers)
        if not v.ok or v.draft is None:
            return ConfirmResult(error=v.reason or "Invalid input")
        if mode is InputMode.EDITING:
            assert selected_index is not None
            return ConfirmResult(mutation=UpdateRecord(index=selected_index, draft=v.draft))
        return ConfirmResult(mutation=InsertRecord(draft=v.draft))

    def show_help(self) -> None:
        self.help_visible = True

    def hide_help(self) -> None:
        self.help_visible = False

    def _reset(self) -> None:
        self.mode = InputMode.IDLE
        self.buffers = [""] * FIELD_COUNT
        self.cursor = 0


__all__ = [
    "FIELD_COUNT",
    "FIELD_TITLES",
    "ConfirmResult",
    "InputMode",
    "InputStateMachine",
    "InsertRecord",
    "Mutation",
    "RecordDraft",
    "UpdateRecord",
    "Validation",
    "record_to_edit_mode",
    "validate_input",
]
