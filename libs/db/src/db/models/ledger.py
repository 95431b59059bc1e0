from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: records
# ---------------------------


class LedgerRecordRow(Base):
    __tablename__ = "records"

    # Ids are assigned by the application (dense 1..N after renumbering), never
    # by the database. The mapping keeps the column optional to match the
    # storage contract; a NULL id is rejected when rows are decoded.
    id: Mapped[int | None] = mapped_column(Integer, primary_key=True, autoincrement=False)
    money_type: Mapped[str] = mapped_column(String, nullable=False)
    # Stored as a non-negative magnitude for both directions.
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    # Category token (FUN, RESTAURANT, ...) or the sentinel "NONE".
    expense: Mapped[str | None] = mapped_column(String, nullable=True)
    # Calendar date as text, "DD.MM.YYYY".
    time: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "money_type in ('INCOME','EXPENSE')",
            name="ck_records_money_type",
        ),
    )


__all__ = [
    "Base",
    "LedgerRecordRow",
]
