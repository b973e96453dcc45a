# ruff: noqa: I001
"""Persistence integration for ledger_classify.

Committed transactions are written to the shared database owned by
``libs/db`` (table ``lc_ledger_entries``). The same table is the history the
deduplicator and the account suggester read at the start of a session.

Scope:
- Upsert committed transactions keyed by a content fingerprint, so a
  transaction committed more than once keeps a single row with its latest
  accounts.
- Read history and known account names back as domain objects.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from db.client import session_scope
from db.models.ledger import LedgerEntry

from .logging_setup import get_logger
from .models import AccountSet, Transaction

_logger = get_logger("ledger_classify.persistence")

type CategorySource = Literal["manual", "rule", "similar", "fuzzy"]

_ALLOWED_CATEGORY_SOURCES: set[str] = {"manual", "rule", "similar", "fuzzy"}


def _to_decimal_2(d: Decimal) -> Decimal:
    return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def compute_fingerprint(txn: Transaction) -> str:
    """Compute a stable SHA-256 fingerprint over the statement line.

    Fields used: timestamp (ISO), description (trimmed), amount (2dp string),
    destination account (trimmed) and the occurrence ordinal among identical
    lines. The source account is left out: it is what review changes.
    """

    payload = {
        "date": txn.date.isoformat(),
        "description": txn.description.strip(),
        "amount": f"{_to_decimal_2(txn.amount):.2f}",
        "destination": (txn.destination_account or "").strip() or None,
        "occurrence": txn.occurrence,
    }
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _insert_for(session: Session):
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise RuntimeError(f"Unsupported database dialect for upsert: {dialect}")


def upsert_entries(
    session: Session,
    transactions: Iterable[Transaction],
    *,
    category_source: CategorySource = "manual",
) -> int:
    """Insert or update committed transactions; returns the row count written."""

    if category_source not in _ALLOWED_CATEGORY_SOURCES:
        raise ValueError(
            f"Unsupported category_source: {category_source!r}. "
            f"Allowed: {sorted(_ALLOWED_CATEGORY_SOURCES)}"
        )

    rows: list[dict[str, Any]] = [
        {
            "fingerprint_sha256": compute_fingerprint(t),
            "posted_at": t.date,
            "description": t.description,
            "amount": _to_decimal_2(t.amount),
            "source_account": t.source_account,
            "destination_account": t.destination_account,
            "category_source": category_source,
            "occurrence": t.occurrence,
        }
        for t in transactions
    ]
    if not rows:
        return 0

    insert = _insert_for(session)
    stmt = insert(LedgerEntry).values(rows)
    stmt = stmt.on_conflict_do_update(
        index_elements=[LedgerEntry.fingerprint_sha256],
        set_={
            "source_account": stmt.excluded.source_account,
            "destination_account": stmt.excluded.destination_account,
            "category_source": stmt.excluded.category_source,
            "updated_at": func.current_timestamp(),
        },
    )
    session.execute(stmt)
    return len(rows)


def _to_transaction(row: LedgerEntry) -> Transaction:
    return Transaction(
        date=row.posted_at,
        description=row.description,
        amount=Decimal(row.amount),
        source_account=row.source_account,
        destination_account=row.destination_account,
        complete=True,
        occurrence=row.occurrence,
    )


def load_history(session: Session) -> list[Transaction]:
    """Return every committed entry as a transaction, oldest first."""

    stmt = select(LedgerEntry).order_by(LedgerEntry.posted_at, LedgerEntry.id)
    return [_to_transaction(row) for row in session.scalars(stmt)]


def known_accounts(session: Session) -> AccountSet:
    src = session.scalars(select(LedgerEntry.source_account).distinct()).all()
    dst = session.scalars(select(LedgerEntry.destination_account).distinct()).all()
    return frozenset(a for a in (*src, *dst) if a)


class LedgerStore:
    """Session-scoped facade over the ledger table.

    Each ``commit`` runs in its own short transaction so a later failure (or
    Quit) never rolls back decisions already made.
    """

    def __init__(self, database_url: str | None) -> None:
        self._database_url = database_url

    def commit(self, txn: Transaction, *, category_source: CategorySource = "manual") -> None:
        with session_scope(database_url=self._database_url) as session:
            upsert_entries(session, [txn], category_source=category_source)
        _logger.debug(
            "committed %s %r -> %s", txn.date.date(), txn.description, txn.source_account
        )

    def committer(self, category_source: CategorySource):
        """Return a one-argument ``commit`` bound to ``category_source``."""

        def _commit(txn: Transaction) -> None:
            self.commit(txn, category_source=category_source)

        return _commit

    def history(self) -> list[Transaction]:
        with session_scope(database_url=self._database_url) as session:
            return load_history(session)

    def accounts(self) -> AccountSet:
        with session_scope(database_url=self._database_url) as session:
            return known_accounts(session)


__all__ = [
    "CategorySource",
    "compute_fingerprint",
    "upsert_entries",
    "load_history",
    "known_accounts",
    "LedgerStore",
]
