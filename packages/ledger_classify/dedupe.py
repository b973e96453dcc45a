"""Drop statement transactions that already exist in the ledger history.

A new transaction ``t`` is a duplicate of a history entry ``h`` when their
sanitized descriptions are equal, their dates are at most ``window`` apart,
and their absolute amounts are exactly equal. Distinct real-world events that
share description and absolute amount inside the window are also dropped;
that is accepted policy.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from itertools import islice

from .logging_setup import get_logger
from .models import Transaction
from .sanitize import sanitize

_logger = get_logger("ledger_classify.dedupe")

# The scan into history starts at least this far before the earliest new
# transaction.
_SCAN_SLACK = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class DedupeResult:
    kept: list[Transaction]
    removed: list[Transaction] = field(default_factory=list)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def sort_by_date(txns: Sequence[Transaction]) -> list[Transaction]:
    """Return ``txns`` ordered by date; equal timestamps keep input order."""

    return sorted(txns, key=lambda t: t.date)


def _scan_start(history: Sequence[Transaction], first: Transaction, window: timedelta) -> int:
    floor = first.date - max(window, _SCAN_SLACK)
    return bisect_left([h.date for h in history], floor)


def find_duplicate(
    txn: Transaction,
    history: Sequence[Transaction],
    window: timedelta,
    *,
    start: int = 0,
) -> Transaction | None:
    """Return the first history entry ``txn`` duplicates, or ``None``.

    ``history`` must be sorted by date; scanning stops once history moves past
    ``txn.date + window``.
    """

    key = sanitize(txn.description)
    magnitude = abs(txn.amount)
    latest = txn.date + window
    for h in islice(history, start, None):
        if h.date > latest:
            break
        if abs(h.date - txn.date) > window:
            continue
        if abs(h.amount) == magnitude and sanitize(h.description) == key:
            return h
    return None


def dedupe(
    new_batch: Sequence[Transaction],
    history: Sequence[Transaction],
    window: timedelta,
) -> DedupeResult:
    """Split ``new_batch`` into kept and removed transactions.

    Both inputs are sorted by date first (stable). The history scan begins at
    the first entry no earlier than the earliest new transaction minus the
    larger of ``window`` and 24h, which trims only entries outside every
    possible window.
    """

    if not new_batch:
        return DedupeResult(kept=[])

    batch = sort_by_date(new_batch)
    past = sort_by_date(history)
    start = _scan_start(past, batch[0], window)

    kept: list[Transaction] = []
    removed: list[Transaction] = []
    for t in batch:
        match = find_duplicate(t, past, window, start=start)
        if match is None:
            kept.append(t)
            continue
        removed.append(t)
        _logger.debug(
            "duplicate dropped: %s %s %s (matches %s)",
            t.date.date(),
            t.description,
            t.amount,
            match.date.date(),
        )

    _logger.info("%d duplicates found and ignored", len(removed))
    return DedupeResult(kept=kept, removed=removed)


__all__ = ["DedupeResult", "dedupe", "find_duplicate", "sort_by_date"]
