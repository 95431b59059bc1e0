# ruff: noqa: I001
"""Ledger records table.

Revision ID: 0001_ledger_records
Revises: None
Create Date: 2025-11-22
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_records"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "records",
        # Application-assigned ids; kept dense (1..N) by the renumbering pass.
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("money_type", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("expense", sa.String(), nullable=True),
        sa.Column("time", sa.String(), nullable=False),
        sa.CheckConstraint(
            "money_type in ('INCOME','EXPENSE')",
            name="ck_records_money_type",
        ),
    )


def downgrade() -> None:
    op.drop_table("records")
