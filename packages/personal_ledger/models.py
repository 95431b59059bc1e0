"""Core value types for ``personal_ledger``.

A :class:`Record` is one ledger entry: a direction (income or expense), a
non-negative amount, an optional expense category and a calendar date. Records
are immutable; updates and renumbering replace them wholesale.

Text vocabularies
-----------------
Storage and the input form exchange directions, categories and dates as text.
The helpers here are the single place where those tokens are defined:

- directions: ``"INCOME"`` / ``"EXPENSE"``;
- categories: the ten tokens of :class:`Category` plus the sentinel ``"NONE"``
  for "no category";
- dates: ``DD.MM.YYYY``.

Any other token is rejected with :class:`UnknownTokenError`.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

# Largest finite IEEE-754 single-precision value.
FLOAT32_MAX = 3.4028234663852886e38

DATE_FORMAT = "%d.%m.%Y"
NO_CATEGORY_TOKEN = "NONE"


class UnknownTokenError(ValueError):
    """Raised when text does not name a known direction or category."""


class Direction(Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @property
    def sign(self) -> str:
        return "+" if self is Direction.INCOME else "-"


class Category(Enum):
    """Fixed expense classifications (declaration order is display order)."""

    FUN = "FUN"
    RESTAURANT = "RESTAURANT"
    SHOPPING = "SHOPPING"
    INVESTMENT = "INVESTMENT"
    FREETIME = "FREETIME"
    HOME = "HOME"
    CLOTH = "CLOTH"
    CAR = "CAR"
    TRAVEL = "TRAVEL"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        """Human-friendly name used in list lines and charts (``"Fun"``)."""
        return self.value.capitalize()


def as_float32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float.

    Raises ``ValueError`` for NaN, infinities and magnitudes beyond the
    single-precision range.
    """

    v = float(value)
    if not math.isfinite(v) or abs(v) > FLOAT32_MAX:
        raise ValueError(f"amount out of range: {value!r}")
    return struct.unpack("<f", struct.pack("<f", v))[0]


# ---------------------------------------------------------------------------
# Token conversions
# ---------------------------------------------------------------------------


def direction_to_token(direction: Direction) -> str:
    return direction.value


def direction_from_token(token: str) -> Direction:
    try:
        return Direction(token)
    except ValueError:
        raise UnknownTokenError(f"unknown direction token: {token!r}") from None


def category_to_token(category: Category | None) -> str:
    """Return the storage token for ``category`` (``"NONE"`` for ``None``)."""
    return NO_CATEGORY_TOKEN if category is None else category.value


def category_from_token(token: str) -> Category | None:
    """Inverse of :func:`category_to_token`; case-sensitive."""
    if token == NO_CATEGORY_TOKEN:
        return None
    try:
        return Category(token)
    except ValueError:
        raise UnknownTokenError(f"unknown category token: {token!r}") from None


def format_date(value: date) -> str:
    # Built by hand so the output never depends on the process locale.
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def parse_date(text: str) -> date:
    """Parse ``DD.MM.YYYY`` into a :class:`datetime.date` (``ValueError`` on failure)."""
    return datetime.strptime(text, DATE_FORMAT).date()


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Record:
    """A single ledger entry.

    ``amount`` is a non-negative magnitude stored at single precision; the
    direction carries the sign (see :attr:`signed_amount`). ``category`` is
    meaningful only for expenses, but is not rejected on income records.
    """

    id: int
    direction: Direction
    amount: float
    category: Category | None
    date: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", as_float32(self.amount))

    @property
    def signed_amount(self) -> float:
        return self.amount if self.direction is Direction.INCOME else -self.amount

    def with_id(self, new_id: int) -> Record:
        return Record(
            id=new_id,
            direction=self.direction,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )

    def format(self) -> str:
        """Fixed-width list line: id, sign, amount, category, date."""

        label = self.category.label if self.category is not None else "-"
        return (
            f"{self.id:>3}  {self.direction.sign:>1} {self.amount:>8.2f}  "
            f"{label:<12}  {format_date(self.date):<10}"
        )


__all__ = [
    "Category",
    "DATE_FORMAT",
    "Direction",
    "NO_CATEGORY_TOKEN",
    "Record",
    "UnknownTokenError",
    "as_float32",
    "category_from_token",
    "category_to_token",
    "direction_from_token",
    "direction_to_token",
    "format_date",
    "parse_date",
]
