"""Rank candidate accounts for a description from committed history.

The ranking is a smoothed multinomial naive-Bayes score over lower-cased
letter tokens of past descriptions, keyed by the account each was filed
under. Only the output contract matters to the review flow: ``suggest``
always returns a non-empty, deterministically ordered list.
"""

from __future__ import annotations

import math
import re
from collections import Counter, defaultdict
from collections.abc import Iterable

from .models import Transaction

FALLBACK_ACCOUNT = "Expenses:Unknown"

_TOKEN_RE = re.compile(r"[a-z]+")


def tokenize(description: str) -> list[str]:
    return _TOKEN_RE.findall(description.lower())


class AccountSuggester:
    def __init__(self, *, fallback: str = FALLBACK_ACCOUNT) -> None:
        self._fallback = fallback
        self._docs: Counter[str] = Counter()
        self._tokens: defaultdict[str, Counter[str]] = defaultdict(Counter)
        self._vocab: set[str] = set()

    @classmethod
    def from_history(
        cls, history: Iterable[Transaction], *, fallback: str = FALLBACK_ACCOUNT
    ) -> AccountSuggester:
        s = cls(fallback=fallback)
        for t in history:
            if t.source_account:
                s.learn(t.description, t.source_account)
        return s

    def learn(self, description: str, account: str) -> None:
        tokens = tokenize(description)
        self._docs[account] += 1
        self._tokens[account].update(tokens)
        self._vocab.update(tokens)

    @property
    def accounts(self) -> frozenset[str]:
        return frozenset(self._docs)

    def _score(self, account: str, tokens: list[str]) -> float:
        total_docs = sum(self._docs.values())
        counts = self._tokens[account]
        denom = sum(counts.values()) + len(self._vocab) + 1
        score = math.log(self._docs[account] / total_docs)
        for tok in tokens:
            score += math.log((counts[tok] + 1) / denom)
        return score

    def suggest(self, description: str, *, limit: int | None = None) -> list[str]:
        """Return accounts best first; never empty."""

        if not self._docs:
            return [self._fallback]
        tokens = tokenize(description)
        ranked = sorted(self._docs, key=lambda a: (-self._score(a, tokens), a))
        return ranked[:limit] if limit else ranked


__all__ = ["AccountSuggester", "FALLBACK_ACCOUNT", "tokenize"]
