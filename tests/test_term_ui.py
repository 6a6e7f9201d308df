import contextlib

from prompt_toolkit import PromptSession
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from statement_report.models import ColumnRole, RawColumn
from statement_report.term_ui import describe_column, prompt_common_info_label, select_column_role

COLUMN = RawColumn(index=3, cells=("Rent", "Gym", "Food", "Books"), rows=(0, 1, 2, 3), header="Purpose")


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


def test_describe_column_shows_samples():
    assert describe_column(COLUMN) == "[3] Purpose: 'Rent', 'Gym', 'Food' ..."


def test_enter_accepts_suggested_role():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        result = select_column_role(COLUMN, default=ColumnRole.amount(), session=sess)
    assert result == ColumnRole.amount()


def test_no_suggestion_defaults_to_skip():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        result = select_column_role(COLUMN, session=sess)
    assert result is None


def test_typed_role_replaces_default():
    with pipe_session() as (pipe, sess):
        # Ctrl-A (home), Ctrl-K (kill to end), type the role, Enter
        pipe.send_text("\x01\x0bdate\r")
        result = select_column_role(COLUMN, default=ColumnRole.amount(), session=sess)
    assert result == ColumnRole.date()


def test_info_role_asks_for_label_prefilled_with_header():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\x01\x0binfo\r")
        pipe.send_text("\r")
        result = select_column_role(COLUMN, session=sess)
    assert result == ColumnRole.common_info("Purpose")


def test_info_label_can_be_replaced():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        pipe.send_text("\x01\x0bVerwendungszweck\r")
        result = select_column_role(COLUMN, default=ColumnRole.common_info("Purpose"), session=sess)
    assert result == ColumnRole.common_info("Verwendungszweck")


def test_empty_label_keeps_initial():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\x01\x0b\r")
        assert prompt_common_info_label(initial="Ref", session=sess) == "Ref"
