"""In-memory snapshot of ledger records with query and aggregation helpers.

A :class:`RecordManager` is rebuilt wholesale from storage after every write;
it owns no persistence logic. Every accessor either returns a derived value or
a fresh copy, so callers can keep results across later reloads without seeing
them change.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date

from .models import Category, Direction, Record


class RecordManager:
    """Ordered collection of :class:`Record` values.

    Order is the order records were added (for snapshots: the order storage
    returned the rows). Nothing here sorts; callers sort explicitly.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: list[Record] = list(records)

    @classmethod
    def from_records(cls, records: Iterable[Record]) -> RecordManager:
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"RecordManager(records={len(self._records)})"

    def is_empty(self) -> bool:
        return not self._records

    # ---- mutation (in-memory only) -------------------------------------------

    def add(self, record: Record) -> None:
        """Append ``record`` to this snapshot; nothing is persisted."""
        self._records.append(record)

    # ---- lookups -----------------------------------------------------------------

    def get_by_id(self, record_id: int) -> Record | None:
        for r in self._records:
            if r.id == record_id:
                return r
        return None

    def get_all(self) -> list[Record]:
        return list(self._records)

    def records_between(self, start: date, end: date) -> list[Record]:
        """Records dated within ``[start, end]`` (inclusive), in snapshot order."""
        return [r for r in self._records if start <= r.date <= end]

    def format_all(self) -> list[str]:
        return [r.format() for r in self._records]

    # ---- aggregates --------------------------------------------------------------

    def balance(self) -> float:
        """Income minus expenses (sum of signed amounts)."""
        return sum((r.signed_amount for r in self._records), 0.0)

    def total_expenses(self) -> float:
        return sum((r.amount for r in self._records if r.direction is Direction.EXPENSE), 0.0)

    def total_income(self) -> float:
        return sum((r.amount for r in self._records if r.direction is Direction.INCOME), 0.0)

    def category_totals(self) -> dict[Category, float]:
        """Expense totals per category.

        Always contains all ten categories in declaration order; categories
        without matching expenses map to ``0.0``. Income records are ignored
        even when they carry a category.
        """

        totals: dict[Category, float] = {c: 0.0 for c in Category}
        for r in self._records:
            if r.direction is Direction.EXPENSE and r.category is not None:
                totals[r.category] += r.amount
        return totals


__all__ = ["RecordManager"]
