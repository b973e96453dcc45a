"""Tiny terminal UI helpers (prompt_toolkit-based).

This module contains the two interactive primitives the review flow needs,
kept decoupled from the review/categorization logic so they're easy to test
in isolation with a pipe input:

- ``read_key``: block for exactly one keystroke.
- ``select_account``: free-text account prompt with completion over known
  accounts (the manual fallback reached through ``.show all``).
"""

from __future__ import annotations

from collections.abc import Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.application import Application
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.output import Output
from prompt_toolkit.validation import ValidationError, Validator

from .errors import InputError

ENTER = "\r"


def read_key(
    message: str = "",
    *,
    input: Input | None = None,
    output: Output | None = None,
) -> str:
    """Return the next keystroke as a string.

    Enter is reported as ``"\\r"`` regardless of the terminal's newline
    convention. Ctrl-C raises ``KeyboardInterrupt``; a closed input raises
    :class:`InputError`.
    """

    kb = KeyBindings()

    @kb.add("c-c", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(exception=KeyboardInterrupt)

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=ENTER)

    @kb.add(Keys.Any)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=event.data)

    app: Application[str] = Application(
        layout=Layout(Window(FormattedTextControl(message), height=1)),
        key_bindings=kb,
        input=input,
        output=output,
        full_screen=False,
        erase_when_done=True,
    )
    try:
        return app.run()
    except EOFError as e:
        raise InputError("Unable to read a key from stdin: input closed") from e


class _AccountValidator(Validator):
    def __init__(self, separator: str) -> None:
        self._separator = separator

    def validate(self, document) -> None:
        text = document.text.strip()
        if not text:
            raise ValidationError(message="Account name cannot be empty")
        if any(not part.strip() for part in text.split(self._separator)):
            raise ValidationError(message=f"Empty segment in {text!r}")


def select_account(
    accounts: Iterable[str],
    *,
    default: str = "",
    message: str = "Account (Enter to accept • Esc to cancel): ",
    separator: str = ":",
    session: PromptSession | None = None,
) -> str | None:
    """Prompt for an account name with completion over ``accounts``.

    Returns the typed/selected name (new names are allowed), or ``None`` when
    the operator cancels with Esc.
    """

    kb = KeyBindings()

    @kb.add("escape", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    words = sorted(set(accounts))
    completer = WordCompleter(words, ignore_case=True, match_middle=True, sentence=True)

    if session is None:
        sess: PromptSession = PromptSession(key_bindings=kb)
    else:
        sess = PromptSession(
            input=getattr(session, "input", None),
            output=getattr(session, "output", None),
            key_bindings=kb,
        )

    value = sess.prompt(
        message,
        default=default,
        completer=completer,
        validator=_AccountValidator(separator),
        validate_while_typing=False,
        key_bindings=kb,
    )
    if value is None:
        return None
    return value.strip()


__all__ = ["ENTER", "read_key", "select_account"]
