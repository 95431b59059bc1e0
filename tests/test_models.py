from __future__ import annotations

import math
from datetime import date

import pytest

from personal_ledger.models import (
    FLOAT32_MAX,
    Category,
    Direction,
    Record,
    UnknownTokenError,
    as_float32,
    category_from_token,
    category_to_token,
    direction_from_token,
    direction_to_token,
    format_date,
    parse_date,
)


def test_category_has_ten_members_in_display_order():
    assert [c.value for c in Category] == [
        "FUN",
        "RESTAURANT",
        "SHOPPING",
        "INVESTMENT",
        "FREETIME",
        "HOME",
        "CLOTH",
        "CAR",
        "TRAVEL",
        "OTHER",
    ]
    assert Category.FREETIME.label == "Freetime"


def test_category_tokens_are_a_bijection_including_none():
    for c in Category:
        assert category_from_token(category_to_token(c)) is c
    assert category_to_token(None) == "NONE"
    assert category_from_token("NONE") is None


@pytest.mark.parametrize("token", ["fun", "Food", "", " FUN", "none"])
def test_unknown_category_token_is_rejected(token):
    with pytest.raises(UnknownTokenError):
        category_from_token(token)


def test_direction_tokens():
    assert direction_to_token(Direction.INCOME) == "INCOME"
    assert direction_from_token("EXPENSE") is Direction.EXPENSE
    with pytest.raises(UnknownTokenError):
        direction_from_token("DEBIT")
    # Still a ValueError for callers that only know the builtin.
    with pytest.raises(ValueError):
        direction_from_token("income")


def test_dates_use_day_month_year_with_zero_padding():
    assert format_date(date(2025, 1, 5)) == "05.01.2025"
    assert parse_date("22.10.2025") == date(2025, 10, 22)
    with pytest.raises(ValueError):
        parse_date("2025-10-22")
    with pytest.raises(ValueError):
        parse_date("31.02.2025")


def test_amount_is_coerced_to_single_precision():
    r = Record(1, Direction.EXPENSE, 0.1, None, date(2025, 1, 1))
    assert r.amount == as_float32(0.1)
    assert r.amount != 0.1
    assert as_float32(150.0) == 150.0


@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan, FLOAT32_MAX * 2])
def test_as_float32_rejects_values_outside_single_precision(bad):
    with pytest.raises(ValueError):
        as_float32(bad)


def test_signed_amount_follows_direction():
    d = date(2025, 1, 1)
    assert Record(1, Direction.INCOME, 20.0, None, d).signed_amount == 20.0
    assert Record(2, Direction.EXPENSE, 20.0, Category.CAR, d).signed_amount == -20.0


def test_with_id_keeps_every_other_field():
    r = Record(7, Direction.EXPENSE, 12.5, Category.HOME, date(2025, 3, 1))
    moved = r.with_id(2)
    assert moved.id == 2
    assert (moved.direction, moved.amount, moved.category, moved.date) == (
        r.direction,
        r.amount,
        r.category,
        r.date,
    )
    assert r.id == 7


def test_record_is_immutable():
    r = Record(1, Direction.INCOME, 1.0, None, date(2025, 1, 1))
    with pytest.raises(AttributeError):
        r.amount = 2.0  # type: ignore[misc]


def test_format_is_fixed_width():
    expense = Record(1, Direction.EXPENSE, 50.0, Category.FUN, date(2025, 10, 22))
    income = Record(12, Direction.INCOME, 1234.5, None, date(2025, 11, 2))

    assert expense.format() == "  1  -    50.00  Fun           22.10.2025"
    assert income.format() == " 12  +  1234.50  -             02.11.2025"
    assert len(expense.format()) == len(income.format())
