from __future__ import annotations

from datetime import date
from pathlib import Path

from personal_ledger.models import Category, Direction, Record
from personal_ledger.persistence import (
    GatewayConfig,
    PersistenceGateway,
    record_to_row_values,
)
from tests.helpers.db import seed_rows, stored_rows


def _rec(rid, direction=Direction.EXPENSE, amount=10.0, category=None, d=date(2025, 1, 1)):
    return Record(rid, direction, amount, category, d)


def test_row_values_use_storage_tokens():
    values = record_to_row_values(_rec(3, category=None, d=date(2025, 2, 9)))
    assert values == {
        "id": 3,
        "money_type": "EXPENSE",
        "amount": 10.0,
        "expense": "NONE",
        "time": "09.02.2025",
    }


def test_insert_then_load_round_trip(gateway, database_url):
    rec = _rec(1, Direction.EXPENSE, 150.0, Category.SHOPPING, date(2025, 12, 25))
    out = gateway.insert(rec)
    assert out.ok and out.value == 1

    loaded = gateway.load_all()
    assert loaded.ok
    assert loaded.value == [rec]
    assert stored_rows(database_url) == [(1, "EXPENSE", 150.0, "SHOPPING", "25.12.2025")]


def test_load_orders_rows_by_id(gateway, database_url):
    seed_rows(
        database_url=database_url,
        rows=[
            {"id": 3, "money_type": "INCOME", "amount": 1.0, "expense": "NONE", "time": "01.01.2025"},
            {"id": 1, "money_type": "INCOME", "amount": 2.0, "expense": "NONE", "time": "01.01.2025"},
            {"id": 2, "money_type": "INCOME", "amount": 3.0, "expense": "NONE", "time": "01.01.2025"},
        ],
    )
    loaded = gateway.load_all()
    assert [r.id for r in loaded.value] == [1, 2, 3]


def test_null_category_column_decodes_to_none(gateway, database_url):
    seed_rows(
        database_url=database_url,
        rows=[{"id": 1, "money_type": "INCOME", "amount": 5.0, "expense": None, "time": "01.01.2025"}],
    )
    [rec] = gateway.load_all().value
    assert rec.category is None


def test_unknown_category_in_storage_is_a_failed_outcome(gateway, database_url):
    seed_rows(
        database_url=database_url,
        rows=[{"id": 1, "money_type": "EXPENSE", "amount": 5.0, "expense": "PIZZA", "time": "01.01.2025"}],
    )
    out = gateway.load_all()
    assert not out.ok
    assert out.value is None
    assert "PIZZA" in (out.error or "")


def test_unparseable_date_in_storage_is_a_failed_outcome(gateway, database_url):
    seed_rows(
        database_url=database_url,
        rows=[{"id": 1, "money_type": "EXPENSE", "amount": 5.0, "expense": "NONE", "time": "2025-01-01"}],
    )
    assert not gateway.load_all().ok


def test_update_overwrites_by_id_and_reports_matches(gateway):
    gateway.insert(_rec(1, amount=10.0))
    out = gateway.update(_rec(1, Direction.INCOME, 99.0, None, date(2025, 5, 5)))
    assert out.ok and out.value == 1
    [rec] = gateway.load_all().value
    assert (rec.direction, rec.amount, rec.date) == (Direction.INCOME, 99.0, date(2025, 5, 5))

    missing = gateway.update(_rec(42))
    assert missing.ok and missing.value == 0


def test_delete_removes_only_the_given_id(gateway):
    for rid in (1, 2, 3):
        gateway.insert(_rec(rid))
    out = gateway.delete(2)
    assert out.ok and out.value == 1
    assert [r.id for r in gateway.load_all().value] == [1, 3]
    assert gateway.count().value == 2


def test_duplicate_id_insert_is_a_failed_outcome(gateway):
    assert gateway.insert(_rec(1)).ok
    out = gateway.insert(_rec(1))
    assert not out.ok
    assert out.error and out.error.startswith("insert failed")
    assert gateway.count().value == 1


def test_renumber_all_makes_ids_dense_in_load_order(gateway):
    for rid, amount in ((2, 20.0), (5, 50.0), (9, 90.0)):
        gateway.insert(_rec(rid, amount=amount))

    out = gateway.renumber_all()
    assert out.ok and out.value == 3
    loaded = gateway.load_all().value
    assert [(r.id, r.amount) for r in loaded] == [(1, 20.0), (2, 50.0), (3, 90.0)]


def test_renumber_all_on_empty_table_is_a_noop(gateway):
    out = gateway.renumber_all()
    assert out.ok and out.value == 0
    assert gateway.load_all().value == []


def test_renumber_all_rolls_back_when_rows_cannot_be_decoded(gateway, database_url):
    seed_rows(
        database_url=database_url,
        rows=[
            {"id": 4, "money_type": "INCOME", "amount": 1.0, "expense": "NONE", "time": "01.01.2025"},
            {"id": 7, "money_type": "INCOME", "amount": 1.0, "expense": "BOGUS", "time": "01.01.2025"},
        ],
    )
    out = gateway.renumber_all()
    assert not out.ok
    # Nothing was rewritten.
    assert [row[0] for row in stored_rows(database_url)] == [4, 7]


def test_missing_table_is_a_failed_outcome(tmp_path: Path):
    gw = PersistenceGateway(GatewayConfig(database_url=f"sqlite+pysqlite:///{tmp_path / 'empty.db'}"))
    out = gw.load_all()
    assert not out.ok
    assert out.error and out.error.startswith("load_all failed")

    assert gw.create_schema().ok
    assert gw.load_all().value == []
