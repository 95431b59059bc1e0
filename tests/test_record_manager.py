from __future__ import annotations

from datetime import date

import pytest

from personal_ledger.models import Category, Direction, Record
from personal_ledger.record_manager import RecordManager


def _rec(rid, direction, amount, category, d):
    return Record(rid, direction, amount, category, d)


@pytest.fixture()
def manager() -> RecordManager:
    return RecordManager.from_records(
        [
            _rec(1, Direction.INCOME, 200.0, None, date(2025, 11, 22)),
            _rec(2, Direction.EXPENSE, 50.0, Category.FUN, date(2025, 10, 22)),
        ]
    )


def test_two_record_scenario_aggregates(manager):
    assert manager.balance() == 150.0
    assert manager.total_income() == 200.0
    assert manager.total_expenses() == 50.0

    totals = manager.category_totals()
    assert totals[Category.FUN] == 50.0
    assert all(v == 0.0 for c, v in totals.items() if c is not Category.FUN)


def test_empty_manager_aggregates_are_zero():
    m = RecordManager()
    assert m.is_empty()
    assert len(m) == 0
    assert m.balance() == 0.0
    assert m.total_income() == 0.0
    assert m.total_expenses() == 0.0
    assert m.format_all() == []
    assert list(m.category_totals().values()) == [0.0] * 10


def test_category_totals_are_dense_and_sum_to_categorized_expenses():
    m = RecordManager(
        [
            _rec(1, Direction.EXPENSE, 10.0, Category.CAR, date(2025, 1, 1)),
            _rec(2, Direction.EXPENSE, 5.0, Category.CAR, date(2025, 1, 2)),
            _rec(3, Direction.EXPENSE, 7.0, None, date(2025, 1, 3)),
            _rec(4, Direction.EXPENSE, 3.0, Category.TRAVEL, date(2025, 1, 4)),
        ]
    )
    totals = m.category_totals()
    assert list(totals) == list(Category)
    assert totals[Category.CAR] == 15.0
    assert totals[Category.TRAVEL] == 3.0
    # The uncategorized expense counts toward total_expenses only.
    assert sum(totals.values()) == 18.0
    assert m.total_expenses() == 25.0


def test_category_on_income_is_ignored_by_category_totals():
    m = RecordManager(
        [
            _rec(1, Direction.INCOME, 100.0, Category.INVESTMENT, date(2025, 1, 1)),
            _rec(2, Direction.EXPENSE, 40.0, Category.INVESTMENT, date(2025, 1, 1)),
        ]
    )
    assert m.category_totals()[Category.INVESTMENT] == 40.0
    assert m.balance() == 60.0


def test_get_by_id(manager):
    found = manager.get_by_id(2)
    assert found is not None and found.category is Category.FUN
    assert manager.get_by_id(99) is None


def test_get_all_returns_a_copy(manager):
    records = manager.get_all()
    records.clear()
    assert len(manager) == 2
    assert [r.id for r in manager] == [1, 2]


def test_add_appends_in_memory(manager):
    manager.add(_rec(3, Direction.EXPENSE, 1.0, None, date(2025, 12, 1)))
    assert [r.id for r in manager.get_all()] == [1, 2, 3]


def test_records_between_is_inclusive_and_keeps_order():
    m = RecordManager(
        [
            _rec(1, Direction.EXPENSE, 1.0, None, date(2025, 3, 1)),
            _rec(2, Direction.EXPENSE, 1.0, None, date(2025, 1, 1)),
            _rec(3, Direction.EXPENSE, 1.0, None, date(2025, 2, 1)),
            _rec(4, Direction.EXPENSE, 1.0, None, date(2025, 4, 1)),
        ]
    )
    got = m.records_between(date(2025, 1, 1), date(2025, 3, 1))
    assert [r.id for r in got] == [1, 2, 3]
    assert m.records_between(date(2026, 1, 1), date(2026, 12, 31)) == []


def test_format_all_follows_snapshot_order(manager):
    lines = manager.format_all()
    assert len(lines) == 2
    assert lines[0].startswith("  1  +   200.00")
    assert lines[1].startswith("  2  -    50.00  Fun")
