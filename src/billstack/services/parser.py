"""Text <-> ledger conversion.

One category per line::

    超市: 10, 16, 54(hmart), 12
    房租：600

The separator is an ASCII or full-width colon, items are split on ASCII or
full-width commas, and each item is ``number``, ``number(note)`` or
``number（note）``. Parsing is tolerant: malformed lines and items are
dropped, never raised. ``parse_ledger_with_diagnostics`` reports what was
dropped for callers that want to surface it.

Serialization writes ``number(note)`` and switches to full-width brackets
when the note itself contains ``)``. Notes holding a comma, a line break,
or both closing brackets have no text form and are rejected on edit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from ..domain.errors import EmptyLedgerError, InvalidCategoryError, InvalidDescriptionError
from ..domain.ledger import Entry, GroupedLedger, generate_entry_id
from ..logging_config import get_logger

logger = get_logger(__name__)

_LINE_RE = re.compile(r"^(.+?)[:：]\s*(.+)$")
_ITEM_SPLIT_RE = re.compile(r"[,，]")
_FULLWIDTH_NOTE_RE = re.compile(r"^([0-9.]+)\s*（([^）]*)）\s*$")
_ASCII_NOTE_RE = re.compile(r"^([0-9.]+)\s*\(([^)]*)\)\s*$")
_BARE_AMOUNT_RE = re.compile(r"^([0-9.]+)\s*$")
_NOTE_BREAK_RE = re.compile(r"[,，\r\n]")
_CATEGORY_BREAK_RE = re.compile(r"[:：\r\n]")

MALFORMED_LINE = "malformed-line"
MALFORMED_ITEM = "malformed-item"
INVALID_AMOUNT = "invalid-amount"


@dataclass(frozen=True, slots=True)
class SkippedItem:
    """A line or amount item dropped by the parser."""

    line_number: int
    text: str
    reason: str


@dataclass(slots=True)
class ParseResult:
    """Parsed ledger plus everything that was silently dropped."""

    ledger: GroupedLedger
    skipped: list[SkippedItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.ledger) == 0


def split_lines(text: str) -> list[str]:
    """Normalise ``\\r\\n`` and ``\\r`` to ``\\n`` and split."""

    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_amount(raw: str) -> Optional[Decimal]:
    """Return a positive Decimal, or None for zero/negative/non-numeric input."""

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def _match_item(item: str) -> Optional[tuple[str, Optional[str]]]:
    for pattern in (_FULLWIDTH_NOTE_RE, _ASCII_NOTE_RE):
        match = pattern.match(item)
        if match:
            return match.group(1), (match.group(2).strip() or None)
    match = _BARE_AMOUNT_RE.match(item)
    if match:
        return match.group(1), None
    return None


def parse_ledger_with_diagnostics(text: str) -> ParseResult:
    """Parse ``text`` and collect diagnostics for dropped lines and items."""

    result = ParseResult(ledger=GroupedLedger())
    for line_number, line in enumerate(split_lines(text or ""), start=1):
        if not line.strip():
            continue

        match = _LINE_RE.match(line)
        category = match.group(1).strip() if match else ""
        if not match or not category:
            result.skipped.append(SkippedItem(line_number, line, MALFORMED_LINE))
            continue

        accepted: list[Entry] = []
        for raw_item in _ITEM_SPLIT_RE.split(match.group(2)):
            item = raw_item.strip()
            if not item:
                continue
            matched = _match_item(item)
            if matched is None:
                result.skipped.append(SkippedItem(line_number, item, MALFORMED_ITEM))
                continue
            amount = parse_amount(matched[0])
            if amount is None:
                result.skipped.append(SkippedItem(line_number, item, INVALID_AMOUNT))
                continue
            accepted.append(
                Entry(
                    id=generate_entry_id(),
                    category=category,
                    amount=amount,
                    description=matched[1],
                )
            )

        # A repeated category keeps its first position; later lines append.
        for entry in accepted:
            result.ledger.add(entry)

    if result.skipped:
        logger.debug(
            "Parser dropped %d item(s)",
            len(result.skipped),
            extra={"skipped": [(s.line_number, s.reason) for s in result.skipped]},
        )
    return result


def parse_ledger(text: str) -> GroupedLedger:
    """Parse ledger text; never raises, worst case returns an empty ledger."""

    return parse_ledger_with_diagnostics(text).ledger


def format_amount(amount: Decimal) -> str:
    """Render an amount without exponent or trailing zeros (``54.50`` -> ``54.5``)."""

    normalized = Decimal(amount).normalize()
    return format(normalized, "f")


def note_brackets(description: str) -> Optional[tuple[str, str]]:
    """Bracket pair that carries ``description``, or None when no pair can."""

    if _NOTE_BREAK_RE.search(description):
        return None
    if ")" not in description:
        return "(", ")"
    if "）" not in description:
        return "（", "）"
    return None


def check_description(description: Optional[str]) -> Optional[str]:
    """Strip ``description``; raise ``InvalidDescriptionError`` if text cannot carry it."""

    if description is None:
        return None
    description = description.strip()
    if not description:
        return None
    if note_brackets(description) is None:
        raise InvalidDescriptionError(
            f"note {description!r} cannot hold a comma or line break, nor both ')' and '）'"
        )
    return description


def check_category(category: str) -> str:
    """Strip ``category``; raise ``InvalidCategoryError`` if it would not parse back."""

    category = (category or "").strip()
    if not category:
        raise InvalidCategoryError("category must not be empty")
    if _CATEGORY_BREAK_RE.search(category):
        raise InvalidCategoryError(f"category {category!r} cannot contain ':', '：' or line breaks")
    return category


def format_entry(entry: Entry) -> str:
    amount = format_amount(entry.amount)
    if not entry.description:
        return amount
    brackets = note_brackets(entry.description)
    if brackets is None:
        raise InvalidDescriptionError(f"note {entry.description!r} cannot be serialized")
    opening, closing = brackets
    return f"{amount}{opening}{entry.description}{closing}"


def serialize_ledger(ledger: GroupedLedger | Iterable[tuple[str, list[Entry]]]) -> str:
    """Inverse of :func:`parse_ledger`: ``category: a1, a2(desc)`` per line."""

    items = ledger.items() if isinstance(ledger, GroupedLedger) else ledger
    lines = [
        f"{category}: {', '.join(format_entry(e) for e in entries)}"
        for category, entries in items
        if entries
    ]
    return "\n".join(lines)


def require_entries(ledger: GroupedLedger) -> GroupedLedger:
    """Caller-level validation: raise ``EmptyLedgerError`` for an empty ledger."""

    if len(ledger) == 0:
        raise EmptyLedgerError()
    return ledger


__all__ = [
    "INVALID_AMOUNT",
    "MALFORMED_ITEM",
    "MALFORMED_LINE",
    "ParseResult",
    "SkippedItem",
    "check_category",
    "check_description",
    "format_amount",
    "format_entry",
    "note_brackets",
    "parse_amount",
    "parse_ledger",
    "parse_ledger_with_diagnostics",
    "require_entries",
    "serialize_ledger",
    "split_lines",
]
