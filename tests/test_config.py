from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from ledger_classify.config import Settings
from ledger_classify.errors import ConfigError


def test_defaults():
    s = Settings.from_env(env={})
    assert s.dedup_window == timedelta(hours=24)
    assert s.database_url is None
    assert s.ledger_bin == "ledger"
    assert s.effective_rules_path == s.config_dir / "rules.yaml"


def test_environment_values():
    s = Settings.from_env(
        env={
            "LEDGER_CLASSIFY_DEDUP_WINDOW_HOURS": "48",
            "LEDGER_CLASSIFY_JOURNAL": "/tmp/books.ledger",
            "LEDGER_CLASSIFY_CONFIG_DIR": "/etc/lc",
            "DATABASE_URL": "sqlite+pysqlite:///a.db",
        }
    )
    assert s.dedup_window == timedelta(hours=48)
    assert s.journal_path == Path("/tmp/books.ledger")
    assert s.effective_rules_path == Path("/etc/lc/rules.yaml")
    assert s.database_url == "sqlite+pysqlite:///a.db"


def test_prefixed_database_url_wins():
    s = Settings.from_env(
        env={"DATABASE_URL": "sqlite:///a.db", "LEDGER_CLASSIFY_DATABASE_URL": "sqlite:///b.db"}
    )
    assert s.database_url == "sqlite:///b.db"


def test_overrides_apply_and_none_is_ignored():
    s = Settings.from_env(
        env={"LEDGER_CLASSIFY_RULES_PATH": "/env/rules.yaml"},
        rules_path=None,
        dedup_window=timedelta(hours=2),
    )
    assert s.rules_path == Path("/env/rules.yaml")
    assert s.dedup_window == timedelta(hours=2)


@pytest.mark.parametrize(
    "env",
    [
        {"LEDGER_CLASSIFY_DEDUP_WINDOW_HOURS": "soon"},
        {"LEDGER_CLASSIFY_DEDUP_WINDOW_HOURS": "-1"},
    ],
)
def test_invalid_values_raise_config_error(env):
    with pytest.raises(ConfigError):
        Settings.from_env(env=env)


def test_settings_are_frozen():
    s = Settings.from_env(env={})
    with pytest.raises(ValidationError):
        s.ledger_bin = "other"
