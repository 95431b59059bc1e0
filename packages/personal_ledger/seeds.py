"""Seed data and JSON import for the ledger.

Two sources feed :meth:`LedgerService.seed`:

- :data:`DEMO_RECORDS`, a small fixed set of demo entries;
- a JSON file holding an array of objects, validated with pydantic::

    [
      {"direction": "EXPENSE", "amount": 150.0, "category": "SHOPPING",
       "date": "25.12.2025"},
      {"direction": "INCOME", "amount": 200.0, "date": "22.11.2025"}
    ]

``category`` may be omitted, ``null`` or ``"NONE"``. Ids in the input are
ignored; imported records are appended under fresh sequential ids.
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

from .input_state import RecordDraft
from .models import (
    Category,
    Direction,
    as_float32,
    category_from_token,
    direction_from_token,
    parse_date,
)

DEMO_RECORDS: tuple[RecordDraft, ...] = (
    RecordDraft(Direction.EXPENSE, 500.0, None, dt.date(2025, 12, 25)),
    RecordDraft(Direction.EXPENSE, 150.0, Category.SHOPPING, dt.date(2025, 12, 25)),
    RecordDraft(Direction.INCOME, 200.0, None, dt.date(2025, 11, 22)),
    RecordDraft(Direction.EXPENSE, 50.0, Category.FUN, dt.date(2025, 10, 22)),
)


class SeedRecord(BaseModel):
    """Typed, validated model of one record in an import file."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    direction: Direction
    amount: float
    category: Category | None = None
    date: dt.date

    @field_validator("direction", mode="before")
    @classmethod
    def _direction_token(cls, v: object) -> object:
        return direction_from_token(v.strip()) if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def _category_token(cls, v: object) -> object:
        return category_from_token(v.strip()) if isinstance(v, str) else v

    @field_validator("date", mode="before")
    @classmethod
    def _date_text(cls, v: object) -> object:
        return parse_date(v.strip()) if isinstance(v, str) else v

    @field_validator("amount")
    @classmethod
    def _amount_range(cls, v: float) -> float:
        if v < 0:
            raise ValueError("amount must be non-negative")
        return as_float32(round(v, 2) + 0.0)

    def to_draft(self) -> RecordDraft:
        return RecordDraft(self.direction, self.amount, self.category, self.date)


_SEED_LIST = TypeAdapter(list[SeedRecord])


def parse_seed_json(text: str) -> list[RecordDraft]:
    """Validate a JSON array of records; raises ``ValueError`` when malformed."""

    items = _SEED_LIST.validate_python(json.loads(text))
    return [it.to_draft() for it in items]


def load_seed_file(path: str | Path) -> list[RecordDraft]:
    return parse_seed_json(Path(path).read_text(encoding="utf-8"))


__all__ = ["DEMO_RECORDS", "SeedRecord", "load_seed_file", "parse_seed_json"]
