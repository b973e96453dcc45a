from datetime import timedelta

from db.client import session_scope
from db.models.ledger import LedgerEntry

from ledger_classify.config import Settings
from ledger_classify.persistence import LedgerStore
from ledger_classify.workflow import run_session

from tests.helpers.builders import ScriptedKeys, Screen, tx
from tests.helpers.db import seed_history

ENTER = "\r"


def _settings(database_url, tmp_path):
    rules = tmp_path / "rules.yaml"
    rules.write_text("Income:Salary:\n  - ^PAYROLL\n", encoding="utf-8")
    return Settings(database_url=database_url, rules_path=rules, dedup_window=timedelta(hours=24))


def _sources(database_url):
    with session_scope(database_url=database_url) as session:
        return {
            (row.description, row.posted_at.day): (row.source_account, row.category_source)
            for row in session.query(LedgerEntry)
        }


def test_session_dedupes_applies_rules_and_reviews(database_url, tmp_path):
    seed_history(
        database_url,
        [
            tx("2024-05-01", "STARBUCKS #12", "-4.50", src="Expenses:Food"),
            tx("2024-04-20", "LYFT RIDE", "-18.00", src="Expenses:Travel"),
        ],
    )
    batch = [
        tx("2024-05-01T12:00:00", "STARBUCKS #12", "-4.50"),
        tx("2024-05-09", "PAYROLL ACME", "2000"),
        tx("2024-05-10", "LYFT RIDE", "-15.00"),
        tx("2024-05-11", "LYFT RIDE", "-9.00"),
        tx("2024-05-12", "NEW SHOP", "-30.00"),
    ]
    keys = ScriptedKeys(["y", ENTER, " ", "e", "f", ENTER, "n"])
    screen = Screen()

    summary = run_session(
        batch,
        _settings(database_url, tmp_path),
        store=LedgerStore(database_url),
        read_key=keys,
        print_fn=screen,
        resolve=lambda _t, _a: None,
    )

    assert (summary.imported, summary.duplicates, summary.matched_by_rules) == (5, 1, 1)
    assert (summary.review.committed, summary.review.propagated) == (2, 1)
    assert keys.remaining == 0
    assert "Found 3 transactions. Review (Y/n/q)? " in screen.lines

    sources = _sources(database_url)
    assert len(sources) == 6
    assert sources[("PAYROLL ACME", 9)] == ("Income:Salary", "rule")
    assert sources[("LYFT RIDE", 10)] == ("Expenses:Travel", "manual")
    assert sources[("LYFT RIDE", 11)] == ("Expenses:Travel", "similar")
    assert sources[("NEW SHOP", 12)] == ("Expenses:Food", "manual")


def test_session_quit_keeps_earlier_commits(database_url, tmp_path):
    batch = [
        tx("2024-05-10", "HARDWARE STORE", "-15.00"),
        tx("2024-05-12", "NEW SHOP", "-30.00"),
    ]
    # Empty history: every transaction is pre-seeded with the fallback account.
    keys = ScriptedKeys(["y", ENTER, "q"])

    summary = run_session(
        batch,
        _settings(database_url, tmp_path),
        store=LedgerStore(database_url),
        read_key=keys,
        print_fn=Screen(),
        resolve=lambda _t, _a: None,
    )

    assert summary.review.quit
    assert _sources(database_url) == {("HARDWARE STORE", 10): ("Expenses:Unknown", "manual")}


def test_session_keeps_identical_lines_as_separate_entries(database_url, tmp_path):
    batch = [
        tx("2024-05-01", "MTA SUBWAY", "-2.90"),
        tx("2024-05-01", "MTA SUBWAY", "-2.90"),
    ]
    keys = ScriptedKeys(["y", ENTER, " ", "n"])
    store = LedgerStore(database_url)

    summary = run_session(
        batch,
        _settings(database_url, tmp_path),
        store=store,
        read_key=keys,
        print_fn=Screen(),
        resolve=lambda _t, _a: None,
    )

    assert (summary.review.committed, summary.review.propagated) == (1, 1)
    assert [(h.description, h.occurrence) for h in store.history()] == [
        ("MTA SUBWAY", 0),
        ("MTA SUBWAY", 1),
    ]
    assert all(t.has_accounts for t in batch if t.complete)
