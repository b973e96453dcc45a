"""Apply a fresh categorization to the run of similar transactions after it."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .logging_setup import get_logger
from .models import Transaction
from .sanitize import letters_only

_logger = get_logger("ledger_classify.propagate")


def _similar(a: Transaction, b: Transaction, key: str) -> bool:
    return letters_only(b.description) == key and a.is_debit == b.is_debit


def propagate(
    batch: Sequence[Transaction],
    start: int,
    *,
    commit: Callable[[Transaction], None],
) -> int:
    """Copy ``batch[start].source_account`` onto the following similar run.

    A transaction is similar when its letters-only description and amount
    sign match the one at ``start``. Each propagated transaction is marked
    complete and committed. The scan stops at the first dissimilar entry, and
    at the first one without a ``destination_account``: it cannot be
    completed, so it is left for the operator to review.

    Returns the index just past the last propagated transaction
    (``start + 1`` when nothing was propagated).
    """

    origin = batch[start]
    key = letters_only(origin.description)
    end = start + 1
    while end < len(batch) and _similar(origin, batch[end], key):
        dst = batch[end]
        if not dst.destination_account:
            break
        dst.source_account = origin.source_account
        dst.complete = True
        commit(dst)
        end += 1

    if end > start + 1:
        _logger.info(
            "propagated %s to %d similar txns after %r",
            origin.source_account,
            end - start - 1,
            origin.description,
        )
    return end


__all__ = ["propagate"]
