"""Core ledger types: entries, the grouped ledger and session categories.

The grouped ledger is an explicit insertion-ordered map so that category
first-appearance order is part of its identity, not an accident of the
underlying dict. The flat ledger is a plain ``list[Entry]``.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator, MutableMapping, Optional

_ID_ALPHABET = string.digits + string.ascii_lowercase

FlatLedger = list["Entry"]


def generate_entry_id() -> str:
    """Return a fresh opaque id: ``<epoch-ms>-<9 base36>-<9 base36>``."""

    def _chunk() -> str:
        return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))

    return f"{int(time.time() * 1000)}-{_chunk()}-{_chunk()}"


@dataclass(frozen=True, slots=True)
class Entry:
    """One monetary transaction inside a category."""

    id: str
    category: str
    amount: Decimal
    description: Optional[str] = None

    @property
    def content(self) -> tuple[str, Decimal, Optional[str]]:
        """Identity-free view used for content-wise comparisons."""
        return (self.category, self.amount, self.description)


class GroupedLedger(MutableMapping[str, list[Entry]]):
    """Ordered mapping of category name to its entries.

    Every entry stored under ``category`` must carry that category. Equality
    is order-sensitive on both categories and entries.
    """

    def __init__(self, groups: Iterable[tuple[str, Iterable[Entry]]] | None = None) -> None:
        self._groups: dict[str, list[Entry]] = {}
        if groups is not None:
            for category, entries in groups:
                self[category] = list(entries)

    def __getitem__(self, category: str) -> list[Entry]:
        return self._groups[category]

    def __setitem__(self, category: str, entries: list[Entry]) -> None:
        entries = list(entries)
        for entry in entries:
            if entry.category != category:
                raise ValueError(
                    f"entry {entry.id!r} has category {entry.category!r}, expected {category!r}"
                )
        self._groups[category] = entries

    def __delitem__(self, category: str) -> None:
        del self._groups[category]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GroupedLedger):
            return NotImplemented
        return list(self._groups.items()) == list(other._groups.items())

    def __repr__(self) -> str:
        inner = ", ".join(f"{cat!r}: {len(entries)} entries" for cat, entries in self._groups.items())
        return f"GroupedLedger({{{inner}}})"

    def add(self, entry: Entry) -> None:
        """Append ``entry`` to its category, creating the category if needed."""
        self._groups.setdefault(entry.category, []).append(entry)

    def categories(self) -> list[str]:
        return list(self._groups)

    def entries(self) -> Iterator[Entry]:
        """Iterate entries in category order, then within-category order."""
        for group in self._groups.values():
            yield from group

    @property
    def entry_count(self) -> int:
        return sum(len(group) for group in self._groups.values())

    def copy(self) -> "GroupedLedger":
        return GroupedLedger((cat, list(entries)) for cat, entries in self._groups.items())

    def content(self) -> list[tuple[str, list[tuple[Decimal, Optional[str]]]]]:
        """Return the ledger without entry ids (for content-wise equality)."""
        return [
            (category, [(e.amount, e.description) for e in entries])
            for category, entries in self._groups.items()
        ]


class SessionCategorySet:
    """Append-only ordered set of category names seen during a UI session.

    Categories are never removed, even when their last entry is deleted, so
    chart lanes keep their positions.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = []
        self._seen: set[str] = set()
        self.extend(names)

    @classmethod
    def from_ledger(cls, ledger: GroupedLedger) -> "SessionCategorySet":
        return cls(ledger.categories())

    def add(self, name: str) -> bool:
        """Append ``name`` if unseen; return True when it was new."""
        if name in self._seen:
            return False
        self._seen.add(name)
        self._names.append(name)
        return True

    def extend(self, names: Iterable[str]) -> list[str]:
        """Append unseen names in order; return the ones that were added."""
        return [name for name in names if self.add(name)]

    def __contains__(self, name: object) -> bool:
        return name in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def as_list(self) -> list[str]:
        return list(self._names)

    def __repr__(self) -> str:
        return f"SessionCategorySet({self._names!r})"
