"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger record table used by ``personal_ledger``.
"""

from .ledger import Base, LedgerRecordRow

__all__ = [
    "Base",
    "LedgerRecordRow",
]
