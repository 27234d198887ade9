"""Ledger text parsing and serialization."""

from __future__ import annotations

from decimal import Decimal

import pytest

from billstack.domain.errors import EmptyLedgerError, InvalidCategoryError, InvalidDescriptionError
from billstack.domain.ledger import Entry
from billstack.services.parser import (
    INVALID_AMOUNT,
    MALFORMED_ITEM,
    MALFORMED_LINE,
    check_category,
    check_description,
    format_amount,
    format_entry,
    parse_ledger,
    parse_ledger_with_diagnostics,
    require_entries,
    serialize_ledger,
)


def test_parse_basic_example():
    ledger = parse_ledger("超市: 10, 16, 54(hmart), 12\n房租: 600")

    assert ledger.categories() == ["超市", "房租"]
    groceries = ledger["超市"]
    assert [e.amount for e in groceries] == [Decimal("10"), Decimal("16"), Decimal("54"), Decimal("12")]
    assert [e.description for e in groceries] == [None, None, "hmart", None]
    assert [e.amount for e in ledger["房租"]] == [Decimal("600")]
    assert all(e.category == "超市" for e in groceries)


def test_invalid_amounts_are_dropped():
    ledger = parse_ledger("X: 0, -5, abc, 3")

    assert ledger.categories() == ["X"]
    assert [e.amount for e in ledger["X"]] == [Decimal("3")]


def test_full_width_punctuation():
    ledger = parse_ledger("餐饮：12.5（午饭），8，20(coffee)")

    entries = ledger["餐饮"]
    assert [e.amount for e in entries] == [Decimal("12.5"), Decimal("8"), Decimal("20")]
    assert [e.description for e in entries] == ["午饭", None, "coffee"]


def test_all_line_break_styles_and_blank_lines():
    ledger = parse_ledger("A: 1\r\nB: 2\rC: 3\n\n   \nD: 4")

    assert ledger.categories() == ["A", "B", "C", "D"]


def test_lines_without_separator_are_skipped():
    ledger = parse_ledger("just some words\nFood: 5")

    assert ledger.categories() == ["Food"]


def test_category_with_no_valid_amounts_does_not_appear():
    ledger = parse_ledger("Empty: 0, abc\nFood: 5")

    assert "Empty" not in ledger
    assert ledger.categories() == ["Food"]


def test_whitespace_is_insignificant():
    ledger = parse_ledger("  Travel  :   100 ( taxi ) ,  25  ")

    first, second = ledger["Travel"]
    assert first.amount == Decimal("100")
    assert first.description == "taxi"
    assert second.amount == Decimal("25")


def test_empty_note_becomes_none():
    ledger = parse_ledger("Misc: 4()")

    assert ledger["Misc"][0].description is None


def test_repeated_category_appends_and_keeps_first_position():
    ledger = parse_ledger("A: 1\nB: 2\nA: 3")

    assert ledger.categories() == ["A", "B"]
    assert [e.amount for e in ledger["A"]] == [Decimal("1"), Decimal("3")]


def test_category_is_text_before_first_separator():
    ledger = parse_ledger("Time: 10:30")

    # "10:30" is not a number, so nothing parses for the category "Time".
    assert len(ledger) == 0


def test_ids_are_unique():
    ledger = parse_ledger("A: 1, 2, 3\nB: 4, 5")

    ids = [e.id for e in ledger.entries()]
    assert len(ids) == len(set(ids)) == 5


@pytest.mark.parametrize("text", ["", "\n\n", "nothing here", "A: 0"])
def test_parse_never_raises(text):
    assert len(parse_ledger(text)) == 0


def test_serialize_format():
    ledger = parse_ledger("超市: 10, 16, 54(hmart), 12\n房租：600")

    assert serialize_ledger(ledger) == "超市: 10, 16, 54(hmart), 12\n房租: 600"


@pytest.mark.parametrize(
    "text",
    [
        "超市: 10, 16, 54(hmart), 12\n房租: 600",
        "餐饮：12.50（午饭），8",
        "A: 1, 2\r\nB: 3(x)\nA: 4",
        "X: 0, -5, abc, 3",
        "Noise line\nTravel: 100(taxi), 2.25",
        "餐饮: 5（a)b）, 7",
        "Misc: 3(（odd）), 4（x(y）",
    ],
)
def test_serialize_then_parse_is_content_stable(text):
    parsed = parse_ledger(text)

    reparsed = parse_ledger(serialize_ledger(parsed))

    assert reparsed.content() == parsed.content()


@pytest.mark.parametrize(
    ("amount", "expected"),
    [("54.50", "54.5"), ("600", "600"), ("1E+2", "100"), ("0.010", "0.01")],
)
def test_format_amount(amount, expected):
    assert format_amount(Decimal(amount)) == expected


def test_diagnostics_report_dropped_items():
    result = parse_ledger_with_diagnostics("no separator\nX: 0, -5, abc, 3, 1.2.3")

    reasons = [(s.line_number, s.text, s.reason) for s in result.skipped]
    assert (1, "no separator", MALFORMED_LINE) in reasons
    assert (2, "0", INVALID_AMOUNT) in reasons
    assert (2, "-5", MALFORMED_ITEM) in reasons
    assert (2, "abc", MALFORMED_ITEM) in reasons
    assert (2, "1.2.3", INVALID_AMOUNT) in reasons
    assert [e.amount for e in result.ledger["X"]] == [Decimal("3")]


def test_diagnostics_match_plain_parse():
    text = "A: 1, x\nB: 2"

    assert parse_ledger_with_diagnostics(text).ledger.content() == parse_ledger(text).content()


def test_require_entries():
    with pytest.raises(EmptyLedgerError, match="no valid data found"):
        require_entries(parse_ledger("nothing"))

    ledger = parse_ledger("A: 1")
    assert require_entries(ledger) is ledger


def test_note_with_ascii_paren_is_written_in_full_width():
    ledger = parse_ledger("餐饮: 5（a)b）, 7")

    assert serialize_ledger(ledger) == "餐饮: 5（a)b）, 7"


@pytest.mark.parametrize(
    ("description", "expected"),
    [("tea", "7(tea)"), ("a)b", "7（a)b）"), ("x（y", "7(x（y)")],
)
def test_format_entry_picks_brackets(description, expected):
    entry = Entry(id="e1", category="A", amount=Decimal("7"), description=description)

    assert format_entry(entry) == expected


@pytest.mark.parametrize("description", ["milk, eggs", "milk，eggs", "two\nlines", "a)b）c"])
def test_check_description_rejects_notes_without_text_form(description):
    with pytest.raises(InvalidDescriptionError):
        check_description(description)


def test_check_description_strips_and_blanks_to_none():
    assert check_description("  tea ") == "tea"
    assert check_description("   ") is None
    assert check_description(None) is None


@pytest.mark.parametrize("category", ["", "  ", "a:b", "a：b", "two\nlines"])
def test_check_category_rejects_unparseable_names(category):
    with pytest.raises(InvalidCategoryError):
        check_category(category)


def test_check_category_strips():
    assert check_category("  Food ") == "Food"
