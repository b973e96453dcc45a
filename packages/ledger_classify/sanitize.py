"""Description normalization used for duplicate and similarity keys."""

from __future__ import annotations

import re

_KEY_DROP_RE = re.compile(r"[^A-Za-z0-9*:/.\-]+")
_LETTERS_DROP_RE = re.compile(r"[^A-Za-z]+")


def sanitize(text: str) -> str:
    """Keep ASCII letters, digits and ``* : / . -``; drop everything else.

    Order is preserved, so the result is always a subsequence of ``text``.
    """

    return _KEY_DROP_RE.sub("", text)


def letters_only(text: str) -> str:
    """Keep ASCII letters only (grouping key for similar transactions)."""

    return _LETTERS_DROP_RE.sub("", text)


__all__ = ["sanitize", "letters_only"]
