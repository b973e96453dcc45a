"""Render committed transactions as ledger journal entries."""

from __future__ import annotations

from collections.abc import Iterable
from os import PathLike
from pathlib import Path

from .models import Transaction

_UNASSIGNED = "Expenses:Unknown"


def format_entry(txn: Transaction, *, width: int = 60) -> str:
    """Return one journal entry: header line plus two postings.

    The destination (statement) account receives the amount as read from
    the statement; the source (category) account balances it.
    """

    src = txn.source_account or _UNASSIGNED
    dst = txn.destination_account or _UNASSIGNED
    amount = f"{txn.amount:.2f}"
    negated = f"{-txn.amount:.2f}"
    return (
        f"{txn.date:%Y/%m/%d}\t{txn.description}\n"
        f"\t{src:<{width}}\t{negated}\n"
        f"\t{dst:<{width}}\t{amount}\n"
    )


def export_journal(
    entries: Iterable[Transaction], path: str | PathLike[str], *, append: bool = False
) -> int:
    """Write ``entries`` to the journal at ``path``; returns the count written.

    The file is replaced unless ``append`` is set.
    """

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    n = 0
    with p.open("a" if append else "w", encoding="utf-8") as f:
        for t in entries:
            f.write(format_entry(t))
            f.write("\n")
            n += 1
    return n


__all__ = ["format_entry", "export_journal"]
