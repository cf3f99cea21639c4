from datetime import date

import pytest

from tracker.domain import Category, Expense
from tracker.export import CSV_COLUMNS, EmptyExportError, expenses_frame, to_csv, to_html_report


def make_sample():
    return (
        Expense("e1", date(2026, 5, 3), Category.FOOD, 42.5, "Groceries, weekly", "2026-05-03T19:02:11+00:00"),
        Expense("e2", date(2026, 5, 7), Category.TRANSPORTATION, 60.0, "Metro", "2026-05-07T08:15:00.123456+00:00"),
        Expense("e3", date(2026, 5, 9), Category.OTHER, 5.0, "", ""),
    )


def test_expenses_frame_columns_and_labels():
    df = expenses_frame(make_sample())

    assert list(df.columns) == CSV_COLUMNS
    assert df["Category"].tolist() == ["Food & Dining", "Transportation", "Other"]
    assert df["Created At"].tolist() == ["2026-05-03 19:02:11", "2026-05-07 08:15:00", ""]


def test_to_csv():
    lines = to_csv(make_sample()).splitlines()

    assert lines[0] == "Date,Category,Amount,Description,Created At"
    assert lines[1] == '2026-05-03,Food & Dining,42.50,"Groceries, weekly",2026-05-03 19:02:11'
    assert lines[2].startswith("2026-05-07,Transportation,60.00,Metro,")
    assert len(lines) == 4


def test_empty_export_is_rejected():
    with pytest.raises(EmptyExportError):
        to_csv(())
    with pytest.raises(EmptyExportError):
        to_html_report(())


def test_html_report():
    html = to_html_report(make_sample(), "USD", today=date(2026, 5, 31))

    assert "<title>Expense Report - May 2026</title>" in html
    assert "$107.50" in html
    assert "<strong>3</strong>" in html
    assert "Food &amp; Dining" in html
    assert "$42.50" in html


def test_html_report_category_shares():
    html = to_html_report(make_sample(), "USD", today=date(2026, 5, 31))

    assert "55.8%" in html
    assert "39.5%" in html
