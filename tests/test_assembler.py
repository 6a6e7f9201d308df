import random
from datetime import UTC, datetime

from statement_report.assembler import assemble_rows
from statement_report.classifier import ColumnClassifier
from statement_report.models import ColumnRole, RawColumn, TypedRow
from statement_report.tokenizer import tokenize


def _classified(text: str, *, has_headers: bool = False, roles=None):
    columns = tokenize(text, has_headers=has_headers).columns
    clf = ColumnClassifier.for_columns(columns)
    for index, role in (roles or {0: ColumnRole.recipient(), 1: ColumnRole.date(), 2: ColumnRole.amount()}).items():
        clf.assign_role(index, role)
    return columns, clf


def test_assembles_typed_rows():
    columns, clf = _classified("Bob;10.01.2024;100,50\r\nBob;15.02.2024;50,00")

    result = assemble_rows(columns, clf)

    assert result.rows == {
        0: TypedRow(payer="Bob", date=datetime(2024, 1, 10, tzinfo=UTC), amount=100.5),
        1: TypedRow(payer="Bob", date=datetime(2024, 2, 15, tzinfo=UTC), amount=50.0),
    }
    assert result.dropped == []


def test_unparsable_date_drops_the_whole_row():
    columns, clf = _classified("Alice;not-a-date;20,00\r\nBob;10.01.2024;1,00")

    result = assemble_rows(columns, clf)

    assert list(result.rows) == [1]
    assert all(r.payer != "Alice" for r in result.rows.values())
    assert [d.row for d in result.dropped] == [0]
    assert result.dropped[0].reasons == ("date: unparsable 'not-a-date'",)


def test_impossible_calendar_date_is_dropped():
    columns, clf = _classified("Bob;31.02.2024;1,00\r\nBob;29.02.2024;2,00")
    result = assemble_rows(columns, clf)
    assert list(result.rows) == [1]
    assert result.rows[1].date == datetime(2024, 2, 29, tzinfo=UTC)


def test_single_digit_day_and_month_are_accepted():
    columns, clf = _classified("Bob;1.2.2024;1,00")
    result = assemble_rows(columns, clf)
    assert result.rows[0].date == datetime(2024, 2, 1, tzinfo=UTC)


def test_every_comma_becomes_a_decimal_point():
    # "1,234,56" -> "1.234.56", which is not a number: the row is dropped.
    columns, clf = _classified("Bob;10.01.2024;1,234,56\r\nBob;10.01.2024;1234,56")

    result = assemble_rows(columns, clf)

    assert list(result.rows) == [1]
    assert result.rows[1].amount == 1234.56
    assert result.dropped[0].reasons == ("amount: unparsable '1,234,56'",)


def test_amount_accepts_signs_and_dots():
    columns, clf = _classified("A;10.01.2024;-12,5\r\nB;10.01.2024;+3\r\nC;10.01.2024;7.25")
    result = assemble_rows(columns, clf)
    assert [r.amount for r in result.rows.values()] == [-12.5, 3.0, 7.25]


def test_non_numeric_amounts_are_dropped():
    columns, clf = _classified(
        "A;10.01.2024;abc\r\nB;10.01.2024;nan\r\nC;10.01.2024;inf\r\nD;10.01.2024;1_000\r\nE;10.01.2024;12EUR"
    )
    result = assemble_rows(columns, clf)
    assert result.rows == {}
    assert [d.row for d in result.dropped] == [0, 1, 2, 3, 4]


def test_empty_payer_is_omitted_not_mapped_to_empty_string():
    columns, clf = _classified(";10.01.2024;1,00\r\nBob;10.01.2024;2,00")
    result = assemble_rows(columns, clf)
    assert list(result.rows) == [1]
    assert result.dropped[0].reasons == ("payer: empty",)


def test_common_info_and_unset_columns_become_extra():
    text = "Payer;Date;Amount;Purpose;Ref\r\nBob;10.01.2024;1,00;Rent;R1\r\nBob;11.01.2024;2,00;;R2"
    columns, clf = _classified(
        text,
        has_headers=True,
        roles={
            0: ColumnRole.recipient(),
            1: ColumnRole.date(),
            2: ColumnRole.amount(),
            3: ColumnRole.common_info("Verwendungszweck"),
        },
    )

    result = assemble_rows(columns, clf)

    assert result.rows[0].extra == (("Verwendungszweck", "Rent"), ("Ref", "R1"))
    # Empty info cells are kept; info columns never drop a row.
    assert result.rows[1].extra == (("Verwendungszweck", ""), ("Ref", "R2"))


def test_unset_column_without_header_uses_position_label():
    columns, clf = _classified("Bob;10.01.2024;1,00;note")
    result = assemble_rows(columns, clf)
    assert result.rows[0].extra == (("Column 4", "note"),)


def test_incomplete_classification_produces_no_rows():
    columns = tokenize("Bob;10.01.2024;1,00").columns
    clf = ColumnClassifier.for_columns(columns)
    clf.assign_role(0, ColumnRole.recipient())
    clf.assign_role(1, ColumnRole.date())

    result = assemble_rows(columns, clf)

    assert result.rows == {}
    assert result.dropped == []


def test_ragged_row_missing_amount_is_dropped_without_shifting_cells():
    # Row 1 lacks its amount field; row 2's amount must stay on row 2.
    columns, clf = _classified("A;10.01.2024;1,00\r\nB;11.01.2024\r\nC;12.01.2024;3,00")

    result = assemble_rows(columns, clf)

    assert sorted(result.rows) == [0, 2]
    assert result.rows[2].payer == "C"
    assert result.rows[2].amount == 3.0
    assert result.dropped[0].row == 1
    assert result.dropped[0].reasons == ("amount: missing cell",)


def test_output_count_equals_key_intersection():
    rng = random.Random(7)
    for _ in range(50):
        n = rng.randint(0, 30)
        payer_cells, date_cells, amount_cells = [], [], []
        ok_payer, ok_date, ok_amount = set(), set(), set()
        for row in range(n):
            if rng.random() < 0.8:
                payer_cells.append("P")
                ok_payer.add(row)
            else:
                payer_cells.append("")
            if rng.random() < 0.8:
                date_cells.append("05.06.2023")
                ok_date.add(row)
            else:
                date_cells.append("2023-06-05")
            if rng.random() < 0.8:
                amount_cells.append("1,5")
                ok_amount.add(row)
            else:
                amount_cells.append("x")
        rows = tuple(range(n))
        columns = (
            RawColumn(0, tuple(payer_cells), rows),
            RawColumn(1, tuple(date_cells), rows),
            RawColumn(2, tuple(amount_cells), rows),
        )
        clf = ColumnClassifier.for_columns(columns)
        clf.assign_role(0, ColumnRole.recipient())
        clf.assign_role(1, ColumnRole.date())
        clf.assign_role(2, ColumnRole.amount())

        result = assemble_rows(columns, clf)

        assert set(result.rows) == ok_payer & ok_date & ok_amount
        assert len(result.rows) + len(result.dropped) == n
