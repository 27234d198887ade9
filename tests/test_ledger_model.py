"""Grouped/flat ledger model and entry-level mutations."""

from __future__ import annotations

from decimal import Decimal

import pytest

from billstack.domain.errors import (
    EntryNotFoundError,
    InvalidAmountError,
    InvalidCategoryError,
    InvalidDescriptionError,
)
from billstack.domain.ledger import Entry, GroupedLedger, SessionCategorySet, generate_entry_id
from billstack.services import ledger_service


def test_grouped_ledger_rejects_foreign_category():
    ledger = GroupedLedger()

    with pytest.raises(ValueError):
        ledger["A"] = [Entry(id="x", category="B", amount=Decimal("1"))]


def test_grouped_ledger_keeps_insertion_order(ledger_factory):
    ledger = ledger_factory({"Zeta": [1], "Alpha": [2], "Mid": [3]})

    assert ledger.categories() == ["Zeta", "Alpha", "Mid"]
    assert [e.id for e in ledger.entries()] == ["e1", "e2", "e3"]
    assert ledger.entry_count == 3


def test_grouped_equality_is_order_sensitive(ledger_factory):
    first = ledger_factory({"A": [1], "B": [2]})
    second = GroupedLedger([("B", first["B"]), ("A", first["A"])])

    assert first != second
    assert first == first.copy()


def test_generated_ids_are_unique():
    ids = {generate_entry_id() for _ in range(200)}

    assert len(ids) == 200
    assert all(len(i.split("-")) == 3 for i in ids)


def test_flat_round_trip_is_identity_for_grouped(ledger_factory):
    ledger = ledger_factory({"A": [1, 2], "B": [3], "C": [(4, "x")]})

    flat = ledger_service.to_flat(ledger)

    assert [e.id for e in flat] == ["e1", "e2", "e3", "e4"]
    assert ledger_service.to_grouped(flat) == ledger


def test_to_grouped_regroups_interleaved_flat_lists():
    flat = [
        Entry("1", "A", Decimal("1")),
        Entry("2", "B", Decimal("2")),
        Entry("3", "A", Decimal("3")),
    ]

    grouped = ledger_service.to_grouped(flat)

    assert grouped.categories() == ["A", "B"]
    assert [e.id for e in grouped["A"]] == ["1", "3"]
    # Global order is re-derived: B's entry now follows both A entries.
    assert [e.id for e in ledger_service.to_flat(grouped)] == ["1", "3", "2"]


def test_ensure_ids_fills_missing_and_is_idempotent():
    ledger = GroupedLedger([("A", [Entry("", "A", Decimal("1")), Entry("keep", "A", Decimal("2"))])])

    once = ledger_service.ensure_ids(ledger)
    twice = ledger_service.ensure_ids(once)

    assert once["A"][0].id
    assert once["A"][1].id == "keep"
    assert twice == once


@pytest.mark.parametrize("raw", ["0", "-3", "abc", "", "NaN", "Infinity"])
def test_validate_amount_rejects(raw):
    with pytest.raises(InvalidAmountError):
        ledger_service.validate_amount(raw)


def test_validate_amount_accepts_decimal_text():
    assert ledger_service.validate_amount(" 12.50 ") == Decimal("12.50")


def test_update_entry_changes_only_requested_fields(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [(10, "old"), 20]}))

    updated = ledger_service.update_entry(flat, "e1", amount="15")
    described = ledger_service.update_entry(updated, "e1", description="  ")

    assert updated[0].amount == Decimal("15")
    assert updated[0].description == "old"
    assert described[0].description is None
    assert flat[0].amount == Decimal("10")


def test_unknown_entry_id_raises(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1]}))

    with pytest.raises(EntryNotFoundError) as excinfo:
        ledger_service.delete_entry(flat, "missing")
    assert "missing" in str(excinfo.value)


def test_delete_entry(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1, 2], "B": [3]}))

    remaining = ledger_service.delete_entry(flat, "e2")

    assert [e.id for e in remaining] == ["e1", "e3"]


def test_move_entry_lands_at_end_of_existing_category(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1, 2], "B": [3]}))

    moved = ledger_service.to_grouped(ledger_service.move_entry(flat, "e2", "B"))

    assert [e.id for e in moved["A"]] == ["e1"]
    # e2 keeps its flat position, which precedes e3.
    assert {e.id for e in moved["B"]} == {"e2", "e3"}
    assert all(e.category == "B" for e in moved["B"])


def test_move_entry_to_new_category(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1, 2]}))

    moved = ledger_service.to_grouped(ledger_service.move_entry(flat, "e2", " New "))

    assert moved.categories() == ["A", "New"]
    assert moved["New"][0].id == "e2"


def test_move_entry_rejects_blank_category(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1]}))

    with pytest.raises(ValueError):
        ledger_service.move_entry(flat, "e1", "   ")


def test_append_entry_generates_id(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1]}))

    result = ledger_service.append_entry(flat, "B", "7.5", "snack")

    assert len(result) == 2
    assert result[-1].category == "B"
    assert result[-1].amount == Decimal("7.5")
    assert result[-1].description == "snack"
    assert result[-1].id not in {"e1", ""}


def test_mutations_reject_text_the_ledger_cannot_hold(ledger_factory):
    flat = ledger_service.to_flat(ledger_factory({"A": [1]}))

    with pytest.raises(InvalidDescriptionError):
        ledger_service.append_entry(flat, "A", "2", "milk, eggs")
    with pytest.raises(InvalidDescriptionError):
        ledger_service.update_entry(flat, "e1", description="a)b）")
    with pytest.raises(InvalidCategoryError):
        ledger_service.move_entry(flat, "e1", "A:B")


def test_totals(ledger_factory):
    ledger = ledger_factory({"A": [1, "2.5"], "B": [10]})

    assert ledger_service.category_totals(ledger) == {"A": Decimal("3.5"), "B": Decimal("10")}
    assert ledger_service.ledger_total(ledger) == Decimal("13.5")


def test_session_categories_are_append_only():
    categories = SessionCategorySet(["A", "B"])

    assert categories.add("A") is False
    assert categories.extend(["C", "B", "D"]) == ["C", "D"]
    assert categories.as_list() == ["A", "B", "C", "D"]
    assert "C" in categories
    assert len(categories) == 4


def test_session_categories_from_ledger(ledger_factory):
    categories = SessionCategorySet.from_ledger(ledger_factory({"X": [1], "Y": [2]}))

    assert list(categories) == ["X", "Y"]
