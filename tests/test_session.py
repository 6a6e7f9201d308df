import pytest

from statement_report.models import ColumnRole, ReportState
from statement_report.session import ImportSession, SessionStateError

TEXT = "Payer;Date;Amount\r\nBob;10.01.2024;100,50\r\nBob;15.02.2024;50,00\r\nAlice;x;1,00"


def _defining() -> ImportSession:
    session = ImportSession()
    session.begin_loading()
    session.load_text(TEXT, has_headers=True)
    return session


def test_state_progression():
    session = ImportSession()
    assert session.state is ReportState.NOT_ASKED
    session.begin_loading()
    assert session.state is ReportState.LOADING
    session.load_text(TEXT, has_headers=True)
    assert session.state is ReportState.DEFINING_COLUMNS
    assert session.headers == {0: "Payer", 1: "Date", 2: "Amount"}
    assert [c.index for c in session.columns] == [0, 1, 2]

    session.assign_role(0, ColumnRole.recipient())
    session.assign_role(1, ColumnRole.date())
    session.assign_role(2, ColumnRole.amount())
    assert session.is_complete()

    rows = session.finish()

    assert session.state is ReportState.READY
    assert sorted(rows) == [0, 1]
    assert [d.row for d in session.dropped] == [2]
    assert [(g.payer, g.total_amount) for g in session.payer_groups()] == [("Bob", 150.5)]
    assert session.year_buckets("Bob")[2024][2] == 50.0
    assert session.year_buckets("Nobody") == {}


def test_reassigning_date_makes_session_incomplete():
    session = _defining()
    session.assign_role(0, ColumnRole.recipient())
    session.assign_role(1, ColumnRole.date())
    session.assign_role(2, ColumnRole.amount())

    session.assign_role(2, ColumnRole.date())

    assert session.classifier.role_of(1) is None
    assert not session.is_complete()


def test_finish_with_incomplete_roles_is_ready_but_empty():
    session = _defining()
    session.assign_role(0, ColumnRole.recipient())
    assert session.finish() == {}
    assert session.state is ReportState.READY
    assert session.payer_groups() == []


def test_column_edits_outside_defining_columns_are_rejected():
    session = ImportSession()
    with pytest.raises(SessionStateError):
        session.assign_role(0, ColumnRole.date())
    with pytest.raises(SessionStateError):
        session.finish()
    with pytest.raises(SessionStateError):
        _ = session.rows


def test_ready_session_discards_raw_columns():
    session = _defining()
    session.finish()
    with pytest.raises(SessionStateError):
        _ = session.columns


def test_loading_a_new_file_replaces_previous_session():
    session = _defining()
    session.assign_role(0, ColumnRole.recipient())
    session.finish()

    session.load_text("Carol;01.01.2025;5,00", has_headers=False)

    assert session.state is ReportState.DEFINING_COLUMNS
    assert session.headers == {}
    assert session.classifier.roles() == {0: None, 1: None, 2: None}


def test_reset_returns_to_not_asked():
    session = _defining()
    session.reset()
    assert session.state is ReportState.NOT_ASKED
    assert not session.is_complete()


def test_classifier_needs_loaded_columns():
    session = ImportSession()
    session.begin_loading()
    with pytest.raises(SessionStateError):
        session.classifier
    session.load_text(TEXT, has_headers=True)
    assert session.classifier.column_indices == (0, 1, 2)
