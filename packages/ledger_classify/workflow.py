# ruff: noqa: I001
"""Session orchestrator: history → dedupe → rules → interactive review.

This module composes the engine pieces behind one importable function so the
CLI stays thin and embedding callers get explicit results instead of process
exits.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable
from dataclasses import dataclass

from .config import Settings
from .dedupe import dedupe
from .logging_setup import get_logger
from .models import AccountSet, Transaction, number_occurrences
from .persistence import LedgerStore
from .reports import LedgerReporter
from .review import ReviewLoop, ReviewStats, Resolver
from .rules import apply_rules, load_rules
from .selector import CategorySelector
from .shortcuts import ShortcutContext, build_shortcuts
from .suggest import AccountSuggester
from .term_ui import read_key as _read_key
from .term_ui import select_account

_logger = get_logger("ledger_classify.workflow")


@dataclass(frozen=True, slots=True)
class SessionSummary:
    imported: int
    duplicates: int
    matched_by_rules: int
    review: ReviewStats


def _default_resolver(separator: str) -> Resolver:
    def _resolve(txn: Transaction, accounts: AccountSet) -> str | None:
        return select_account(accounts, default=txn.source_account or "", separator=separator)

    return _resolve


def run_session(
    batch: list[Transaction],
    settings: Settings,
    *,
    store: LedgerStore | None = None,
    read_key: Callable[[], str] = _read_key,
    print_fn: Callable[..., None] = builtins.print,
    resolve: Resolver | None = None,
) -> SessionSummary:
    """Run a complete classification session over ``batch``.

    Steps
    -----
    1) Number identical statement lines, then load committed history and
       known accounts from the ledger store.
    2) Drop duplicates of history within ``settings.dedup_window``.
    3) Auto-categorize and commit rule matches.
    4) Review the remainder interactively, committing as the operator goes.
    """

    number_occurrences(batch)
    store = store or LedgerStore(settings.database_url)
    history = store.history()
    accounts = store.accounts()

    deduped = dedupe(batch, history, settings.dedup_window)
    print_fn(f"\t{deduped.removed_count} duplicates found and ignored.\n")

    rules = load_rules(settings.effective_rules_path)
    ruled = apply_rules(deduped.kept, rules, commit=store.committer("rule"))
    print_fn(f"\t{len(ruled.matched)} txns have been categorized based on rules.\n")

    suggester = AccountSuggester.from_history(history)

    def menu_for(txn: Transaction) -> ShortcutContext:
        hits = suggester.suggest(txn.description, limit=settings.max_suggestions)
        return build_shortcuts(hits, separator=settings.separator)

    selector = CategorySelector(
        menu_for,
        commit=store.committer("manual"),
        read_key=read_key,
        print_fn=print_fn,
        commit_keys=settings.commit_keys,
        separator=settings.separator,
    )
    reporter = (
        LedgerReporter(settings.journal_path, ledger_bin=settings.ledger_bin)
        if settings.journal_path
        else None
    )
    loop = ReviewLoop(
        selector,
        suggest=suggester.suggest,
        commit_similar=store.committer("similar"),
        commit_resolved=store.committer("fuzzy"),
        reporter=reporter,
        resolve=resolve or _default_resolver(settings.separator),
        known_accounts=accounts | suggester.accounts,
        read_key=read_key,
        print_fn=print_fn,
    )
    stats = loop.run(ruled.unmatched)
    _logger.info(
        "session done: %d imported, %d duplicates, %d by rules, %d reviewed, %d propagated",
        len(batch),
        deduped.removed_count,
        len(ruled.matched),
        stats.committed,
        stats.propagated,
    )
    return SessionSummary(
        imported=len(batch),
        duplicates=deduped.removed_count,
        matched_by_rules=len(ruled.matched),
        review=stats,
    )


__all__ = ["SessionSummary", "run_session"]
