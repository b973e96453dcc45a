"""Load the canonical transaction CSV produced by upstream converters.

Statement-specific parsing happens before this tool. The canonical CSV has a
header row with ``date``, ``description`` and ``amount`` columns and an
optional ``account`` column naming the statement's own (destination)
account. Parsing follows RFC 4180 via the stdlib :mod:`csv` module.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from os import PathLike

from .errors import InputError
from .models import Transaction, number_occurrences

REQUIRED_COLUMNS = ("date", "description", "amount")

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y/%m/%d")


def _parse_date(raw: str) -> datetime:
    s = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise ValueError(f"invalid date: {raw!r}")


def _parse_amount(raw: str) -> Decimal:
    s = raw.strip().replace(",", "")
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc


def row_to_transaction(row: Mapping[str, str], *, account: str | None = None) -> Transaction:
    dst = (row.get("account") or "").strip() or account
    return Transaction(
        date=_parse_date(row["date"]),
        description=row["description"].strip(),
        amount=_parse_amount(row["amount"]),
        destination_account=dst,
    )


def read_transactions(
    rows: Iterable[Mapping[str, str]], *, account: str | None = None
) -> list[Transaction]:
    out: list[Transaction] = []
    for lineno, row in enumerate(rows, start=2):
        try:
            out.append(row_to_transaction(row, account=account))
        except (KeyError, ValueError, AttributeError) as e:
            raise InputError(f"line {lineno}: {e}") from e
    number_occurrences(out)
    return out


def load_csv(path: str | PathLike[str], *, account: str | None = None) -> list[Transaction]:
    """Read the canonical CSV at ``path``.

    ``account`` fills ``destination_account`` for rows without an
    ``account`` value.
    """

    try:
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            headers = set(reader.fieldnames or [])
            missing = [c for c in REQUIRED_COLUMNS if c not in headers]
            if missing:
                raise InputError(f"{path}: missing columns: {', '.join(missing)}")
            return read_transactions(reader, account=account)
    except OSError as e:
        raise InputError(f"Unable to read {path}: {e}") from e
    except csv.Error as e:
        raise InputError(f"Failed to parse CSV {path}: {e}") from e


__all__ = ["REQUIRED_COLUMNS", "load_csv", "read_transactions", "row_to_transaction"]
