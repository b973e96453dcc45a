"""Pytest configuration for test isolation.

The engine reads its database from ``DATABASE_URL`` (or
``LEDGER_CLASSIFY_DATABASE_URL``) and caches one SQLAlchemy engine per URL.
To keep tests hermetic, each test gets its own file-backed SQLite database in
its temporary directory, stray ``LEDGER_CLASSIFY_*`` variables are cleared,
and cached engines are disposed afterwards.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make sure the workspace packages are importable without an install.
_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]

from db.client import dispose_engines  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Point ``DATABASE_URL`` at a per-test SQLite file."""

    for key in list(os.environ):
        if key.startswith("LEDGER_CLASSIFY_"):
            monkeypatch.delenv(key)
    url = f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    yield url
    dispose_engines()


@pytest.fixture
def database_url(_isolate_database: str) -> str:
    return _isolate_database
