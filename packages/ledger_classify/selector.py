"""Keystroke-driven category selection for one transaction.

Each call to :meth:`CategorySelector.select` renders the active shortcut
context and consumes keys until it produces a :class:`~.models.Signal`:

1. A commit key (Enter) persists the transaction when both accounts are set.
   It yields ``Advance(1)``, or ``Stay`` when this call already drilled into
   a nested context, so the finalized transaction is shown once more before
   the next Enter moves on.
2. A control key yields its signal without persisting anything.
3. A label key extends the breadcrumb and tentatively sets
   ``source_account``. A label with children switches to the nested context
   and keeps reading keys; a leaf yields ``Stay``.
4. Any other key yields ``Stay`` and changes nothing.

After a show-same-payee/amount signal the selection state is kept, and the
next call for the same transaction resumes in the same context.
"""

from __future__ import annotations

import builtins
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from .logging_setup import get_logger
from .models import (
    BACK,
    QUIT,
    SHOW_ALL,
    SHOW_SAME_AMOUNT,
    SHOW_SAME_PAYEE,
    SKIP,
    STAY,
    Signal,
    SignalKind,
    Transaction,
)
from .shortcuts import Control, ShortcutContext, render
from .term_ui import read_key as _read_key

_logger = get_logger("ledger_classify.selector")

_CONTROL_SIGNALS: dict[Control, Signal] = {
    Control.BACK: BACK,
    Control.SKIP: SKIP,
    Control.QUIT: QUIT,
    Control.SHOW_SAME_AMOUNT: SHOW_SAME_AMOUNT,
    Control.SHOW_SAME_PAYEE: SHOW_SAME_PAYEE,
    Control.SHOW_ALL: SHOW_ALL,
}

_RESUMABLE = frozenset({SignalKind.SHOW_SAME_PAYEE, SignalKind.SHOW_SAME_AMOUNT})


@dataclass(slots=True)
class SelectionState:
    """Context stack for one transaction; the last element is active."""

    txn: Transaction
    contexts: list[ShortcutContext]
    breadcrumb: list[str] = field(default_factory=list)
    drilled: bool = False

    @property
    def context(self) -> ShortcutContext:
        return self.contexts[-1]


class CategorySelector:
    """Interactive category state machine.

    Parameters
    ----------
    menu_for:
        Builds the root shortcut context for a transaction (typically from
        its ranked account suggestions).
    commit:
        Persistence collaborator called when the commit key finalizes a
        transaction.
    read_key / print_fn:
        Injection points for tests; default to the terminal.
    """

    def __init__(
        self,
        menu_for: Callable[[Transaction], ShortcutContext],
        *,
        commit: Callable[[Transaction], None],
        read_key: Callable[[], str] = _read_key,
        print_fn: Callable[..., None] = builtins.print,
        commit_keys: Collection[str] = ("\r", "\n"),
        separator: str = ":",
    ) -> None:
        self._menu_for = menu_for
        self._commit = commit
        self._read_key = read_key
        self._print = print_fn
        self._commit_keys = frozenset(commit_keys)
        self._separator = separator
        self._resume: SelectionState | None = None

    def _start(self, txn: Transaction) -> SelectionState:
        resume, self._resume = self._resume, None
        if resume is not None and resume.txn is txn:
            return resume
        return SelectionState(txn=txn, contexts=[self._menu_for(txn)])

    def _render(self, state: SelectionState) -> None:
        if state.breadcrumb:
            self._print("")
            self._print(f"Selected [{self._separator.join(state.breadcrumb)}]")
        self._print(render(state.context))

    def _finalize(self, state: SelectionState) -> Signal:
        txn = state.txn
        self._commit(txn)
        txn.complete = True
        _logger.debug("committed %r as %s", txn.description, txn.source_account)
        return STAY if state.drilled else Signal.advance(1)

    def step(self, state: SelectionState, ch: str) -> Signal | None:
        """Apply one keystroke; ``None`` means keep reading in the new context."""

        if ch in self._commit_keys:
            if state.txn.has_accounts:
                return self._finalize(state)
            return STAY

        binding = state.context.maps_to(ch)
        if binding is None:
            return STAY
        if binding.control is not None:
            return _CONTROL_SIGNALS[binding.control]

        assert binding.label is not None
        state.breadcrumb.append(binding.label)
        state.txn.source_account = self._separator.join(state.breadcrumb)
        if binding.child is None:
            return STAY
        state.contexts.append(binding.child)
        state.drilled = True
        return None

    def select(self, txn: Transaction) -> Signal:
        """Run the state machine for ``txn`` until it emits a signal."""

        state = self._start(txn)
        while True:
            self._render(state)
            signal = self.step(state, self._read_key())
            if signal is None:
                continue
            if signal.kind in _RESUMABLE:
                self._resume = state
            return signal


__all__ = ["CategorySelector", "SelectionState"]
