"""Data models for ``ledger_classify``.

A review session owns a mutable, ordered list of :class:`Transaction` objects.
Components mutate them in place (accounts, completion flag) and never recreate
them, so identity is meaningful: the selector resumes state for the *same*
transaction object.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ---------------------------------------------------------------------------
# Transactions and account collections
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Transaction:
    """One statement entry with up to two account assignments.

    ``source_account`` receives the category chosen during review;
    ``destination_account`` is the statement's own account and is expected to
    be populated upstream. ``complete`` implies both accounts are non-empty,
    except for rule-matched transactions which only set ``source_account``.

    ``occurrence`` numbers identical statement lines (same date, description,
    amount and destination) within one import, so two same-day $2.90 subway
    rides stay two entries. See :func:`number_occurrences`.
    """

    date: datetime
    description: str
    amount: Decimal
    source_account: str | None = None
    destination_account: str | None = None
    complete: bool = False
    occurrence: int = 0

    @property
    def line_key(self) -> tuple[datetime, str, Decimal, str | None]:
        return (
            self.date,
            self.description.strip(),
            self.amount,
            (self.destination_account or "").strip() or None,
        )

    @property
    def has_accounts(self) -> bool:
        return bool(self.source_account) and bool(self.destination_account)

    @property
    def is_debit(self) -> bool:
        # Sign bit semantics: -0 counts as negative.
        return self.amount.is_signed()


type AccountSet = frozenset[str]
"""Previously known account names, used by the interactive resolver."""

type Batch = list[Transaction]


def number_occurrences(batch: Iterable[Transaction]) -> None:
    """Set ``occurrence`` to the ordinal of each line among identical ones.

    Numbering follows batch order, so re-reading the same statement yields the
    same identities.
    """

    seen: Counter[tuple[datetime, str, Decimal, str | None]] = Counter()
    for t in batch:
        key = t.line_key
        t.occurrence = seen[key]
        seen[key] += 1


# ---------------------------------------------------------------------------
# Review signals
# ---------------------------------------------------------------------------


class SignalKind(Enum):
    ADVANCE = "advance"
    BACK = "back"
    SKIP = "skip"
    QUIT = "quit"
    STAY = "stay"
    SHOW_SAME_PAYEE = "show same payee"
    SHOW_SAME_AMOUNT = "show same amount"
    SHOW_ALL = "show all"


@dataclass(frozen=True, slots=True)
class Signal:
    """Outcome of one category-selection call.

    ``step`` is the index delta the review loop applies for the navigation
    kinds (advance, back, skip, stay); it is zero for the side-flow kinds.
    """

    kind: SignalKind
    step: int = 0

    @classmethod
    def advance(cls, n: int = 1) -> Signal:
        return cls(SignalKind.ADVANCE, n)

    @property
    def moves(self) -> bool:
        return self.kind in _NAVIGATION

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        if self.kind is SignalKind.ADVANCE:
            return f"Advance({self.step})"
        return self.kind.name.title().replace("_", "")


_NAVIGATION = frozenset(
    {SignalKind.ADVANCE, SignalKind.BACK, SignalKind.SKIP, SignalKind.STAY}
)

BACK = Signal(SignalKind.BACK, -1)
SKIP = Signal(SignalKind.SKIP, 1)
QUIT = Signal(SignalKind.QUIT)
STAY = Signal(SignalKind.STAY, 0)
SHOW_SAME_PAYEE = Signal(SignalKind.SHOW_SAME_PAYEE)
SHOW_SAME_AMOUNT = Signal(SignalKind.SHOW_SAME_AMOUNT)
SHOW_ALL = Signal(SignalKind.SHOW_ALL)


__all__ = [
    "Transaction",
    "AccountSet",
    "Batch",
    "number_occurrences",
    "SignalKind",
    "Signal",
    "BACK",
    "SKIP",
    "QUIT",
    "STAY",
    "SHOW_SAME_PAYEE",
    "SHOW_SAME_AMOUNT",
    "SHOW_ALL",
]
