"""Shared SQLAlchemy models registry for the ledger store.

Currently includes the committed-entry table used by ``ledger_classify``.
"""

from .ledger import Base, LedgerEntry

__all__ = [
    "Base",
    "LedgerEntry",
]
