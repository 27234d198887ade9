"""Advisory events emitted by the chart interaction controller.

Intents describe a requested mutation; the host application decides how to
apply them. None of them touch the ledger on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .ledger import Entry


@dataclass(frozen=True, slots=True)
class ReassignIntent:
    """Move ``entry_id`` into ``category`` (drag and drop between lanes)."""

    entry_id: str
    category: str


@dataclass(frozen=True, slots=True)
class CreateEntryIntent:
    """Add a new entry to ``category`` (click in the lane's empty band)."""

    category: str


@dataclass(frozen=True, slots=True)
class EditEntryIntent:
    """Edit or delete ``entry`` (secondary click on a segment)."""

    entry: Entry


Intent = Union[ReassignIntent, CreateEntryIntent, EditEntryIntent]

__all__ = ["CreateEntryIntent", "EditEntryIntent", "Intent", "ReassignIntent"]
