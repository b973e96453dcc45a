"""Exception types raised by ``ledger_classify``.

Library code raises these and never exits the process; the CLI is the only
place that turns them into a diagnostic and a non-zero exit status.
"""

from __future__ import annotations


class ClassifyError(Exception):
    """Base exception for classification session errors."""


class ConfigError(ClassifyError):
    """Malformed rule file, invalid pattern, or invalid setting."""


class InputError(ClassifyError):
    """Unreadable input stream or statement file."""


__all__ = [
    "ClassifyError",
    "ConfigError",
    "InputError",
]
