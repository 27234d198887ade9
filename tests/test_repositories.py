"""SQLModel repositories for bills, budgets and settings."""

from __future__ import annotations

from decimal import Decimal

import pytest

from billstack.domain.errors import BillNotFoundError, InvalidAmountError


def test_bill_crud(bill_repo):
    created = bill_repo.create("b1", "March", "A: 1", "local")

    assert created.id == "b1"
    assert bill_repo.get("b1").raw_text == "A: 1"

    updated = bill_repo.update("b1", "March v2", "A: 1, 2")
    assert updated.name == "March v2"
    assert bill_repo.get("b1").raw_text == "A: 1, 2"

    bill_repo.delete("b1")
    with pytest.raises(BillNotFoundError):
        bill_repo.get("b1")


def test_update_missing_bill_raises(bill_repo):
    with pytest.raises(BillNotFoundError):
        bill_repo.update("nope", "x", "A: 1")


def test_delete_missing_bill_raises(bill_repo):
    bill_repo.create("b1", "Kept", "A: 1", "local")

    with pytest.raises(BillNotFoundError):
        bill_repo.delete("nope")

    assert bill_repo.get("b1").name == "Kept"


def test_bills_are_scoped_by_owner(bill_repo):
    bill_repo.create("b1", "Mine", "", "alice")
    bill_repo.create("b2", "Also mine", "", "alice")
    bill_repo.create("b3", "Theirs", "", "bob")

    assert {b.id for b in bill_repo.list_by_owner("alice")} == {"b1", "b2"}
    assert [b.name for b in bill_repo.list_by_owner("bob")] == ["Theirs"]
    assert bill_repo.list_by_owner("carol") == []


def test_budget_store(budget_repo):
    assert budget_repo.get("Food") is None

    budget_repo.set("Food", Decimal("250.5"))
    budget_repo.set("Rent", Decimal("600"))
    budget_repo.set("Food", Decimal("300"))

    assert budget_repo.get("Food") == Decimal("300")
    assert budget_repo.list_all() == {"Food": Decimal("300"), "Rent": Decimal("600")}

    budget_repo.delete("Food")
    assert budget_repo.get("Food") is None


def test_budget_allows_zero_but_not_negative(budget_repo):
    budget_repo.set("Fun", Decimal("0"))
    assert budget_repo.get("Fun") == Decimal("0")

    with pytest.raises(InvalidAmountError):
        budget_repo.set("Fun", Decimal("-1"))


def test_settings_store(settings_repo):
    assert settings_repo.get("display_mode") is None

    settings_repo.set("display_mode", "uniform", description="Chart mode")
    settings_repo.set("display_mode", "proportional")

    assert settings_repo.get("display_mode") == "proportional"
