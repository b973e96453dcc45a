import logging

import pytest

from ledger_classify import logging_setup
from ledger_classify.logging_setup import _parse_level, get_logger


@pytest.mark.parametrize(
    ("level", "expected"),
    [(logging.DEBUG, logging.DEBUG), ("warning", logging.WARNING), ("15", 15)],
)
def test_explicit_levels(level, expected):
    assert _parse_level(level) == expected


def test_unknown_level_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("LEDGER_CLASSIFY_LOG_LEVEL", "error")
    assert _parse_level("LOUD") == logging.ERROR
    assert _parse_level(None) == logging.ERROR


def test_invalid_environment_value_defaults_to_info(monkeypatch):
    monkeypatch.setenv("LEDGER_CLASSIFY_LOG_LEVEL", "LOUD")
    assert _parse_level(None) == logging.INFO


def test_get_logger_installs_null_handler_when_unconfigured(monkeypatch):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    pkg = logging.getLogger("ledger_classify")
    monkeypatch.setattr(pkg, "handlers", [])

    log = get_logger("ledger_classify.rules")

    assert log.name == "ledger_classify.rules"
    assert any(isinstance(h, logging.NullHandler) for h in pkg.handlers)
