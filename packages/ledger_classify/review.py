"""Interactive review workflow over a batch of transactions.

:class:`ReviewLoop` walks the batch with an index driven by the signals the
category selector emits:

- ``Advance(1)`` (a commit): propagate the category to the following run of
  similar transactions, show what was propagated, wait for a key, and jump
  past them.
- ``Back`` / ``Skip`` / ``Stay``: move the index by the signal's step. Going
  back from the first transaction ends the pass.
- ``ShowSimilarByPayee`` / ``ShowSimilarByAmount``: print the comparison
  report, wait for a key, and re-enter selection on the same transaction
  (the selector resumes its context).
- ``ShowAll``: fall back to the free-text account resolver.
- ``Quit``: end the whole review; earlier commits stay committed.

Every pass starts with a summary of the batch and a Y/n/q confirmation, and
passes repeat until the operator declines.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import STAY, AccountSet, Signal, SignalKind, Transaction
from .propagate import propagate
from .reports import LedgerReporter
from .selector import CategorySelector
from .term_ui import read_key as _read_key

_logger = get_logger("ledger_classify.review")

type Resolver = Callable[[Transaction, AccountSet], str | None]


@dataclass(slots=True)
class ReviewStats:
    passes: int = 0
    committed: int = 0
    propagated: int = 0
    resolved: int = 0
    quit: bool = False


# ----------------------------------------------------------------------------
# Formatting
# ----------------------------------------------------------------------------


def format_summary(txn: Transaction, idx: int, total: int) -> str:
    """Return a one-line summary: position, date, amount, description, accounts."""

    pos = f"[{idx + 1:>3}/{total}]" if total else "[---]"
    mark = " ✓" if txn.complete else ""
    src = txn.source_account or "?"
    dst = txn.destination_account or "?"
    return (
        f"{pos} {txn.date:%Y-%m-%d} {txn.amount:>10.2f}  {txn.description}"
        f"  [{src} <- {dst}]{mark}"
    )


class ReviewLoop:
    """Drive the selector across a batch.

    Parameters
    ----------
    selector:
        The category state machine; it commits on its own when the operator
        accepts a transaction.
    suggest:
        Ranked account suggestions for a description (never empty); the top
        one pre-seeds ``source_account`` for display.
    commit_similar / commit_resolved:
        Persistence for propagated transactions and for transactions
        finalized through the manual resolver.
    reporter:
        Comparison-report collaborator; when ``None`` the show-similar keys
        only print a notice.
    resolve:
        Manual account resolver used for ``ShowAll``; receives the
        transaction and the known accounts, returns a name or ``None``.
    """

    def __init__(
        self,
        selector: CategorySelector,
        *,
        suggest: Callable[[str], list[str]],
        commit_similar: Callable[[Transaction], None],
        commit_resolved: Callable[[Transaction], None],
        reporter: LedgerReporter | None = None,
        resolve: Resolver | None = None,
        known_accounts: AccountSet = frozenset(),
        read_key: Callable[[], str] = _read_key,
        print_fn: Callable[..., None] = builtins.print,
    ) -> None:
        self._selector = selector
        self._suggest = suggest
        self._commit_similar = commit_similar
        self._commit_resolved = commit_resolved
        self._reporter = reporter
        self._resolve = resolve
        self._known = set(known_accounts)
        self._read_key = read_key
        self._print = print_fn

    # ------------------------------------------------------------------
    # Pass setup
    # ------------------------------------------------------------------

    def _preseed(self, batch: list[Transaction]) -> None:
        for i, t in enumerate(batch):
            if not t.complete:
                t.source_account = self._suggest(t.description)[0]
            self._print(format_summary(t, i, len(batch)))
        self._print("")

    def _confirm(self, count: int) -> bool:
        self._print(f"Found {count} transactions. Review (Y/n/q)? ")
        return self._read_key().lower() not in {"n", "q"}

    # ------------------------------------------------------------------
    # Side flows
    # ------------------------------------------------------------------

    def _show_report(self, kind: SignalKind, txn: Transaction) -> None:
        if self._reporter is None:
            self._print("No ledger journal configured; comparison report unavailable.")
        elif kind is SignalKind.SHOW_SAME_PAYEE:
            self._print(self._reporter.same_payee(txn))
        else:
            self._print(self._reporter.same_amount(txn))
        self._print("Press any key")
        self._read_key()

    def _resolve_manually(self, txn: Transaction, stats: ReviewStats) -> Signal:
        if self._resolve is None:
            return STAY
        account = self._resolve(txn, frozenset(self._known))
        if not account:
            return STAY
        txn.source_account = account
        self._known.add(account)
        if not txn.has_accounts:
            return STAY
        self._commit_resolved(txn)
        txn.complete = True
        stats.resolved += 1
        return Signal.advance(1)

    def _after_commit(self, batch: list[Transaction], i: int, stats: ReviewStats) -> int:
        stats.committed += 1
        if batch[i].source_account:
            self._known.add(batch[i].source_account)
        upto = propagate(batch, i, commit=self._commit_similar)
        if upto == i + 1:
            return upto

        stats.propagated += upto - i - 1
        self._print(format_summary(batch[i], i, len(batch)))
        for j in range(i + 1, upto):
            self._print(format_summary(batch[j], j, len(batch)))
        self._print("")
        self._print(
            "The above txns were similar to the last categorized txns, "
            "and were categorized accordingly. Can be changed by skipping back and forth."
        )
        self._read_key()
        return upto

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def review_pass(self, batch: list[Transaction], stats: ReviewStats) -> bool:
        """Walk the batch once; returns ``True`` when the operator quit."""

        total = len(batch)
        i = 0
        while 0 <= i < total:
            txn = batch[i]
            self._print("")
            self._print(format_summary(txn, i, total))
            signal = self._selector.select(txn)

            if signal.kind is SignalKind.QUIT:
                return True
            if signal.kind in (SignalKind.SHOW_SAME_PAYEE, SignalKind.SHOW_SAME_AMOUNT):
                self._show_report(signal.kind, txn)
                continue
            if signal.kind is SignalKind.SHOW_ALL:
                signal = self._resolve_manually(txn, stats)

            if signal.kind is SignalKind.ADVANCE and signal.step == 1:
                i = self._after_commit(batch, i, stats)
            else:
                i += signal.step
        return False

    def run(self, batch: list[Transaction]) -> ReviewStats:
        """Offer review passes over ``batch`` until declined or quit."""

        stats = ReviewStats()
        if not batch:
            self._print("No transactions to review.")
            return stats

        while True:
            self._preseed(batch)
            if not self._confirm(len(batch)):
                return stats
            stats.passes += 1
            if self.review_pass(batch, stats):
                stats.quit = True
                _logger.info("review quit after %d commits", stats.committed)
                return stats


__all__ = ["ReviewLoop", "ReviewStats", "format_summary"]
