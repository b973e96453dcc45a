"""Rule-based auto-categorization from a ``rules.yaml`` file.

The rule file maps a category (account) name to an ordered list of regular
expressions matched against transaction descriptions::

    Expenses:Travel:
      - ^LYFT\\ +\\*RIDE
    Expenses:Food:
      - ^STARBUCKS

Categories are tried in name order so precedence between overlapping rules is
deterministic; patterns within a category keep file order. A missing file is
an empty rule set; a malformed file or invalid pattern is a ``ConfigError``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .errors import ConfigError
from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("ledger_classify.rules")


class RuleSet(BaseModel):
    """Validated category → patterns mapping with precompiled expressions."""

    model_config = ConfigDict(frozen=True)

    categories: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    _compiled: list[tuple[str, list[re.Pattern[str]]]] = PrivateAttr(default_factory=list)

    @field_validator("categories")
    @classmethod
    def _patterns_compile(cls, v: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        for category, patterns in v.items():
            if not category.strip():
                raise ValueError("category name cannot be empty")
            for pattern in patterns:
                try:
                    re.compile(pattern)
                except re.error as e:
                    raise ValueError(f"invalid pattern {pattern!r} for {category!r}: {e}") from e
        return v

    def model_post_init(self, _context: object) -> None:
        self._compiled = [
            (category, [re.compile(p) for p in self.categories[category]])
            for category in sorted(self.categories)
        ]

    def __len__(self) -> int:
        return len(self.categories)

    def match(self, description: str) -> str | None:
        """Return the first category with a pattern found in ``description``."""

        for category, patterns in self._compiled:
            if any(p.search(description) for p in patterns):
                return category
        return None


def parse_rules(text: str, *, source: str = "<rules>") -> RuleSet:
    """Parse rule-file YAML text into a :class:`RuleSet`."""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse rules at {source}: {e}") from e
    if data is None:
        return RuleSet()
    if not isinstance(data, dict):
        raise ConfigError(f"Rules at {source} must be a mapping of category to patterns")
    try:
        return RuleSet(categories=data)
    except ValidationError as e:
        raise ConfigError(f"Invalid rules at {source}: {e}") from e


def load_rules(path: str | PathLike[str]) -> RuleSet:
    """Load the rule file at ``path``; a missing file yields an empty set."""

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.info("no rule file at %s; rule matching disabled", p)
        return RuleSet()
    except OSError as e:
        raise ConfigError(f"Unable to read rules at {p}: {e}") from e
    rules = parse_rules(text, source=str(p))
    _logger.info("loaded %d rule categories from %s", len(rules), p)
    return rules


@dataclass(frozen=True, slots=True)
class RuleResult:
    matched: list[Transaction] = field(default_factory=list)
    unmatched: list[Transaction] = field(default_factory=list)


def apply_rules(
    batch: Iterable[Transaction],
    rules: RuleSet,
    *,
    commit: Callable[[Transaction], None],
) -> RuleResult:
    """Categorize and commit every transaction a rule matches.

    Matched transactions get ``source_account`` set to the category and are
    marked complete without checking ``destination_account``, which is
    assumed fixed upstream. Returns matched and unmatched in input order.
    """

    matched: list[Transaction] = []
    unmatched: list[Transaction] = []
    for t in batch:
        category = rules.match(t.description)
        if category is None:
            unmatched.append(t)
            continue
        t.source_account = category
        t.complete = True
        commit(t)
        matched.append(t)
        _logger.debug("rule %s matched %r", category, t.description)

    _logger.info("%d txns have been categorized based on rules", len(matched))
    return RuleResult(matched=matched, unmatched=unmatched)


__all__ = ["RuleSet", "RuleResult", "parse_rules", "load_rules", "apply_rules"]
