import contextlib

import pytest
from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from ledger_classify.term_ui import ENTER, read_key, select_account

ACCOUNTS = ["Expenses:Food", "Expenses:Travel", "Cash"]


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


def test_read_key_returns_single_character():
    with create_pipe_input() as pipe:
        pipe.send_text("x")
        assert read_key(input=pipe, output=DummyOutput()) == "x"


def test_read_key_reports_enter_as_carriage_return():
    with create_pipe_input() as pipe:
        pipe.send_text("\r")
        assert read_key(input=pipe, output=DummyOutput()) == ENTER


def test_read_key_ctrl_c_interrupts():
    with create_pipe_input() as pipe:
        pipe.send_text("\x03")
        with pytest.raises(KeyboardInterrupt):
            read_key(input=pipe, output=DummyOutput())


def test_select_account_accepts_default_with_enter():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert select_account(ACCOUNTS, default="Cash", session=sess) == "Cash"


def test_select_account_allows_new_names():
    with pipe_session() as (pipe, sess):
        # Ctrl-A (home), Ctrl-K (kill to end), type a new account, Enter
        pipe.send_text("\x01\x0bExpenses:Coffee\r")
        result = select_account(ACCOUNTS, default="Cash", session=sess)
        assert result == "Expenses:Coffee"


def test_select_account_rejects_empty_then_accepts():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        pipe.send_text("Income\r")
        assert select_account(ACCOUNTS, session=sess) == "Income"
