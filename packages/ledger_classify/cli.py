# ruff: noqa: I001
"""CLI for the ``ledger_classify`` package.

This module exposes callable command handlers (``cmd_review``,
``cmd_export_journal``) and a Typer-based console interface. Environment
variables are loaded from a local ``.env`` using ``python-dotenv`` before
settings are resolved. Business logic lives in ``ledger_classify.workflow``
and related modules; handlers only translate errors into exit codes.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .config import Settings
from .errors import ClassifyError
from .logging_setup import configure_logging


def cmd_review(
    csv_path: str,
    *,
    account: str | None = None,
    database_url: str | None = None,
    rules_path: str | None = None,
    journal_path: str | None = None,
    dedup_hours: float | None = None,
) -> int:
    """Classify the transactions in a canonical CSV and persist the results.

    Errors are written to stderr and the function returns a non-zero exit
    status. On success (including an operator Quit), returns ``0``.
    """

    from datetime import timedelta

    from .ingest import load_csv
    from .workflow import run_session

    try:
        settings = Settings.from_env(
            database_url=database_url,
            rules_path=rules_path,
            journal_path=journal_path,
            dedup_window=timedelta(hours=dedup_hours) if dedup_hours is not None else None,
        )
        if not settings.database_url:
            print(
                "Error: no database configured; pass --database-url or set DATABASE_URL.",
                file=sys.stderr,
            )
            return 1
        batch = load_csv(csv_path, account=account)
        summary = run_session(batch, settings)
    except ClassifyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted; committed transactions were kept.", file=sys.stderr)
        return 130

    review = summary.review
    print(
        f"Imported {summary.imported}: {summary.duplicates} duplicates, "
        f"{summary.matched_by_rules} by rules, {review.committed} reviewed, "
        f"{review.propagated} similar, {review.resolved} resolved manually."
    )
    return 0


def cmd_export_journal(out: str | None = None, *, database_url: str | None = None) -> int:
    """Rewrite the ledger journal from every committed entry in the store."""

    from .journal import export_journal
    from .persistence import LedgerStore

    try:
        settings = Settings.from_env(database_url=database_url, journal_path=out)
    except ClassifyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not settings.journal_path:
        print(
            "Error: no journal path; pass --out or set LEDGER_CLASSIFY_JOURNAL.",
            file=sys.stderr,
        )
        return 1
    if not settings.database_url:
        print("Error: no database configured; pass --database-url.", file=sys.stderr)
        return 1

    try:
        entries = LedgerStore(settings.database_url).history()
        n = export_journal(entries, settings.journal_path)
    except OSError as e:
        print(f"Error: failed to write journal: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {n} entries to {settings.journal_path}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Assign ledger accounts to imported statement transactions: drop duplicates, "
        "apply rules.yaml, then review the rest one keystroke at a time."
    ),
)

# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Canonical CSV with date, description, amount (and optional account) columns",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
    readable=True,
)


@app.command("review")
def review_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    account: str | None = typer.Option(
        None, help="Destination account for rows without an account column value."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    rules: str | None = typer.Option(
        None, "--rules", help="Rule file (defaults to <config dir>/rules.yaml)."
    ),
    journal: str | None = typer.Option(
        None, help="Ledger journal used for same-payee/same-amount reports."
    ),
    dedup_hours: float | None = typer.Option(
        None, help="Duplicate window in hours (default 24)."
    ),
) -> None:
    """Review and categorize a batch of transactions."""

    code = cmd_review(
        str(csv_path),
        account=account,
        database_url=database_url,
        rules_path=rules,
        journal_path=journal,
        dedup_hours=dedup_hours,
    )
    if code:
        raise typer.Exit(code)


@app.command("export-journal")
def export_journal_cmd(
    out: str | None = typer.Option(None, help="Journal file to write."),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Write committed entries as a ledger journal."""

    code = cmd_export_journal(out, database_url=database_url)
    if code:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None, help="Log level (falls back to LEDGER_CLASSIFY_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging once.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
