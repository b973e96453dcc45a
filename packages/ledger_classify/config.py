"""Session configuration.

Settings are read once at startup (environment, then CLI overrides) and then
passed explicitly to every component; nothing reads them from module state.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

_ENV_PREFIX = "LEDGER_CLASSIFY_"


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "ledger-classify"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    dedup_window: timedelta = timedelta(hours=24)
    database_url: str | None = None
    journal_path: Path | None = None
    ledger_bin: str = "ledger"
    config_dir: Path = Field(default_factory=_default_config_dir)
    rules_path: Path | None = None
    commit_keys: tuple[str, ...] = ("\r", "\n")
    separator: str = ":"
    max_suggestions: int = 8

    @field_validator("dedup_window")
    @classmethod
    def _non_negative_window(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("dedup window cannot be negative")
        return v

    @field_validator("max_suggestions")
    @classmethod
    def _positive_suggestions(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_suggestions must be positive")
        return v

    @field_validator("separator")
    @classmethod
    def _separator_present(cls, v: str) -> str:
        if not v:
            raise ValueError("separator cannot be empty")
        return v

    @property
    def effective_rules_path(self) -> Path:
        return self.rules_path or (self.config_dir / "rules.yaml")

    @classmethod
    def from_env(
        cls, env: Mapping[str, str] | None = None, **overrides: Any
    ) -> Settings:
        """Build settings from ``LEDGER_CLASSIFY_*`` variables plus overrides.

        ``None`` overrides are ignored so CLI options left unset fall back to
        the environment. Invalid values raise :class:`ConfigError`.
        """

        env = os.environ if env is None else env
        values: dict[str, Any] = {}

        hours = env.get(_ENV_PREFIX + "DEDUP_WINDOW_HOURS")
        if hours:
            try:
                values["dedup_window"] = timedelta(hours=float(hours))
            except ValueError as e:
                raise ConfigError(f"Invalid {_ENV_PREFIX}DEDUP_WINDOW_HOURS: {hours!r}") from e

        db_url = env.get(_ENV_PREFIX + "DATABASE_URL") or env.get("DATABASE_URL")
        if db_url:
            values["database_url"] = db_url
        for key, field_name in (
            ("JOURNAL", "journal_path"),
            ("LEDGER_BIN", "ledger_bin"),
            ("CONFIG_DIR", "config_dir"),
            ("RULES_PATH", "rules_path"),
        ):
            raw = env.get(_ENV_PREFIX + key)
            if raw:
                values[field_name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e


__all__ = ["Settings"]
