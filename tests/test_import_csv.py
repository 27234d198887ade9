"""CSV import into a grouped ledger."""

from __future__ import annotations

from decimal import Decimal

import pytest

from billstack.services.import_csv import (
    ColumnMapping,
    default_mapping,
    import_csv_file,
    normalize_frame,
    rows_to_ledger,
)
from billstack.services.parser import parse_ledger, serialize_ledger


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text(
        "Category, Amount ,Note\n"
        "Food,$12.50,lunch\n"
        "Rent,600,\n"
        ",5,orphan\n"
        "Food,abc,\n"
        'Food,"1,200",party\n',
        encoding="utf-8",
    )
    return path


def test_normalize_frame_lowercases_headers(csv_file):
    frame = normalize_frame(file_path=csv_file)

    assert list(frame.columns) == ["category", "amount", "note"]
    assert frame.iloc[1]["note"] == ""


def test_default_mapping():
    assert default_mapping(["a"]) is None
    assert default_mapping(["c", "amt"]) == ColumnMapping("c", "amt", None)
    assert default_mapping(["c", "amt", "n", "x"]).description == "n"


def test_import_csv_file(csv_file):
    ledger = import_csv_file(csv_path=csv_file, mapping=ColumnMapping("Category", "AMOUNT", "Note"))

    assert ledger.categories() == ["Food", "Rent"]
    assert [(e.amount, e.description) for e in ledger["Food"]] == [
        (Decimal("12.50"), "lunch"),
        (Decimal("1200"), "party"),
    ]
    assert serialize_ledger(ledger) == "Food: 12.5(lunch), 1200(party)\nRent: 600"


def test_missing_columns_raise(csv_file):
    with pytest.raises(ValueError, match="missing column"):
        import_csv_file(csv_path=csv_file, mapping=ColumnMapping("type", "amount"))


def test_rows_to_ledger_without_description():
    rows = [{"cat": "A", "amt": "3"}, {"cat": "A", "amt": "0"}, {"cat": "B", "amt": " 4 "}]

    ledger = rows_to_ledger(rows=rows, mapping=ColumnMapping("cat", "amt"))

    assert ledger.content() == [("A", [(Decimal("3"), None)]), ("B", [(Decimal("4"), None)])]


def test_memos_and_categories_are_made_text_safe():
    rows = [
        {"cat": "Food: groceries", "amt": "8", "memo": "milk, eggs"},
        {"cat": "Food: groceries", "amt": "2", "memo": "a)b）c"},
        {"cat": "Misc", "amt": "1", "memo": "fix (door)\nagain"},
    ]

    ledger = rows_to_ledger(rows=rows, mapping=ColumnMapping("cat", "amt", "memo"))

    assert ledger.content() == [
        ("Food- groceries", [(Decimal("8"), "milk; eggs"), (Decimal("2"), "a]b）c")]),
        ("Misc", [(Decimal("1"), "fix (door) again")]),
    ]
    assert parse_ledger(serialize_ledger(ledger)).content() == ledger.content()
