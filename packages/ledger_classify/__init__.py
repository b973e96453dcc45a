"""Public interface for the ``ledger_classify`` package.

This module exposes the engine's operations and models as the stable import
surface. There is no runtime logic here, only symbol re-exports.
"""

from .dedupe import DedupeResult, dedupe
from .errors import ClassifyError, ConfigError, InputError
from .models import Signal, SignalKind, Transaction, number_occurrences
from .propagate import propagate
from .review import ReviewLoop, ReviewStats
from .rules import RuleSet, apply_rules, load_rules
from .sanitize import letters_only, sanitize
from .selector import CategorySelector
from .shortcuts import ShortcutContext, build_shortcuts
from .workflow import SessionSummary, run_session

__all__ = [
    # Operations
    "sanitize",
    "letters_only",
    "dedupe",
    "apply_rules",
    "load_rules",
    "build_shortcuts",
    "propagate",
    "number_occurrences",
    "run_session",
    # Engine objects
    "CategorySelector",
    "ReviewLoop",
    # Models / results
    "Transaction",
    "Signal",
    "SignalKind",
    "RuleSet",
    "ShortcutContext",
    "DedupeResult",
    "ReviewStats",
    "SessionSummary",
    # Errors
    "ClassifyError",
    "ConfigError",
    "InputError",
]
