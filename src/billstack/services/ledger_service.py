"""Grouped/flat conversion and per-entry mutations addressed by id."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from ..domain.errors import EntryNotFoundError, InvalidAmountError
from ..domain.ledger import Entry, FlatLedger, GroupedLedger, generate_entry_id
from .parser import check_category, check_description

_UNSET = object()


def to_flat(grouped: GroupedLedger) -> FlatLedger:
    """Return entries ordered by category first appearance, then within category."""

    return list(grouped.entries())


def to_grouped(flat: Iterable[Entry]) -> GroupedLedger:
    """Regroup a flat list; categories keep the order of their first entry."""

    grouped = GroupedLedger()
    for entry in flat:
        grouped.add(entry)
    return grouped


def ensure_ids(grouped: GroupedLedger) -> GroupedLedger:
    """Assign a fresh id to every entry lacking one. Idempotent."""

    result = GroupedLedger()
    for category, entries in grouped.items():
        result[category] = [
            entry if entry.id else replace(entry, id=generate_entry_id()) for entry in entries
        ]
    return result


def validate_amount(raw) -> Decimal:
    """Coerce ``raw`` to a positive Decimal or raise ``InvalidAmountError``."""

    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"invalid amount: {raw!r}") from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(f"amount must be greater than zero, got {raw!r}")
    return amount


def _index_of(flat: FlatLedger, entry_id: str) -> int:
    for index, entry in enumerate(flat):
        if entry.id == entry_id:
            return index
    raise EntryNotFoundError(entry_id)


def find_entry(flat: FlatLedger, entry_id: str) -> Entry:
    return flat[_index_of(flat, entry_id)]


def update_entry(flat: FlatLedger, entry_id: str, *, amount=_UNSET, description=_UNSET) -> FlatLedger:
    """Return a new flat ledger with the entry's amount and/or description changed."""

    index = _index_of(flat, entry_id)
    changes: dict = {}
    if amount is not _UNSET:
        changes["amount"] = validate_amount(amount)
    if description is not _UNSET:
        changes["description"] = check_description(description)
    result = list(flat)
    result[index] = replace(flat[index], **changes)
    return result


def delete_entry(flat: FlatLedger, entry_id: str) -> FlatLedger:
    index = _index_of(flat, entry_id)
    return flat[:index] + flat[index + 1 :]


def move_entry(flat: FlatLedger, entry_id: str, category: str) -> FlatLedger:
    """Reassign an entry to ``category``; it keeps its position in the flat list.

    After regrouping it lands at the end of the target category when that
    category already had entries before it.
    """

    category = check_category(category)
    index = _index_of(flat, entry_id)
    result = list(flat)
    result[index] = replace(flat[index], category=category)
    return result


def append_entry(
    flat: FlatLedger, category: str, amount, description: Optional[str] = None
) -> FlatLedger:
    """Append a new entry with a fresh id."""

    category = check_category(category)
    entry = Entry(
        id=generate_entry_id(),
        category=category,
        amount=validate_amount(amount),
        description=check_description(description),
    )
    return list(flat) + [entry]


def category_totals(grouped: GroupedLedger) -> dict[str, Decimal]:
    """Sum amounts per category, in category order."""

    return {
        category: sum((e.amount for e in entries), Decimal("0"))
        for category, entries in grouped.items()
    }


def ledger_total(grouped: GroupedLedger) -> Decimal:
    return sum((e.amount for e in grouped.entries()), Decimal("0"))


__all__ = [
    "append_entry",
    "category_totals",
    "delete_entry",
    "ensure_ids",
    "find_entry",
    "ledger_total",
    "move_entry",
    "to_flat",
    "to_grouped",
    "update_entry",
    "validate_amount",
]
