"""Comparison listings of past ledger entries via the ``ledger`` command.

Used while reviewing to look at how similar payees or amounts were filed
before. The window spans one month and two days on either side of the
transaction date.
"""

from __future__ import annotations

import shlex
import subprocess
from datetime import date, datetime, timedelta
from os import PathLike

from .logging_setup import get_logger
from .models import Transaction

_logger = get_logger("ledger_classify.reports")


def _add_date(d: date, months: int, days: int) -> date:
    # Day overflow rolls into the following month (Mar 31 - 1 month = Mar 2).
    month_index = d.month - 1 + months
    first = date(d.year + month_index // 12, month_index % 12 + 1, 1)
    return first + timedelta(days=d.day - 1 + days)


def _ledger_date(d: date) -> str:
    return f"{d.year}/{d.month}/{d.day}"


def date_before_after(when: datetime | date) -> tuple[str, str]:
    """Return ledger-formatted ``(begin, end)`` around ``when``."""

    d = when.date() if isinstance(when, datetime) else when
    before = _add_date(d, -1, -2)
    after = _add_date(d, 1, 2)
    return _ledger_date(before), _ledger_date(after)


class LedgerReporter:
    """Runs ``ledger r`` against a journal file and returns its text output."""

    def __init__(
        self,
        journal_path: str | PathLike[str],
        *,
        ledger_bin: str = "ledger",
        timeout: float = 30.0,
    ) -> None:
        self._journal = str(journal_path)
        self._bin = ledger_bin
        self._timeout = timeout

    def _base(self, txn: Transaction) -> list[str]:
        before, after = date_before_after(txn.date)
        return [self._bin, "r", "-f", self._journal, "-b", before, "-e", after]

    def same_payee_command(self, txn: Transaction) -> list[str]:
        return self._base(txn) + ["@" + txn.description]

    def same_amount_command(self, txn: Transaction) -> list[str]:
        return self._base(txn) + ["--display", f"quantity(amount) == {txn.amount:f}"]

    def run(self, cmd: list[str]) -> str:
        """Run ``cmd`` and return the command line followed by its output.

        Failures are reported in the returned text instead of raised; the
        listing is only a display aid for the operator.
        """

        line = shlex.join(cmd)
        _logger.debug("running %s", line)
        try:
            proc = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self._timeout, check=False
            )
        except FileNotFoundError:
            _logger.warning("report command not found: %s", self._bin)
            return f"{line}\nError: {self._bin!r} not found"
        except subprocess.TimeoutExpired:
            _logger.warning("report command timed out: %s", line)
            return f"{line}\nError: timed out after {self._timeout:.0f}s"
        if proc.returncode != 0:
            return f"{line}\n{proc.stdout}{proc.stderr}".rstrip()
        return f"{line}\n{proc.stdout}".rstrip()

    def same_payee(self, txn: Transaction) -> str:
        return self.run(self.same_payee_command(txn))

    def same_amount(self, txn: Transaction) -> str:
        return self.run(self.same_amount_command(txn))


__all__ = ["LedgerReporter", "date_before_after"]
