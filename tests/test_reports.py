import sys
from datetime import date, datetime

from ledger_classify.reports import LedgerReporter, date_before_after

from tests.helpers.builders import tx


def test_date_window_spans_a_month_and_two_days():
    assert date_before_after(datetime(2024, 5, 15, 9, 30)) == ("2024/4/13", "2024/6/17")


def test_date_window_rolls_day_overflow_into_next_month():
    assert date_before_after(date(2024, 3, 31)) == ("2024/2/29", "2024/5/3")
    # Feb 29 does not exist in 2023, so the begin date lands on Mar 1.
    assert date_before_after(date(2023, 3, 31)) == ("2023/3/1", "2023/5/3")


def test_date_window_crosses_year_boundary():
    assert date_before_after(date(2024, 1, 1)) == ("2023/11/29", "2024/2/3")


def test_same_payee_command():
    r = LedgerReporter("books.ledger")
    t = tx("2024-05-15", "STARBUCKS #12", "-4.50")
    assert r.same_payee_command(t) == [
        "ledger", "r", "-f", "books.ledger",
        "-b", "2024/4/13", "-e", "2024/6/17",
        "@STARBUCKS #12",
    ]


def test_same_amount_command_uses_plain_decimal():
    r = LedgerReporter("books.ledger", ledger_bin="/opt/ledger")
    cmd = r.same_amount_command(tx("2024-05-15", "X", "-4.50"))
    assert cmd[0] == "/opt/ledger"
    assert cmd[-2:] == ["--display", "quantity(amount) == -4.50"]


def test_missing_binary_is_reported_in_text():
    r = LedgerReporter("books.ledger", ledger_bin="no-such-ledger-binary-for-tests")
    out = r.same_payee(tx("2024-05-15", "X", "-1"))
    assert out.splitlines()[0].startswith("no-such-ledger-binary-for-tests r -f")
    assert "not found" in out


def test_run_returns_command_line_and_output():
    r = LedgerReporter("books.ledger")
    out = r.run([sys.executable, "-c", "print('2024/05/01 STARBUCKS')"])
    assert out.splitlines()[-1] == "2024/05/01 STARBUCKS"


def test_run_includes_stderr_on_failure():
    r = LedgerReporter("books.ledger")
    out = r.run([sys.executable, "-c", "import sys; sys.stderr.write('bad journal'); sys.exit(1)"])
    assert "bad journal" in out
