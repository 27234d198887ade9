"""Domain types and repository protocols."""

from .errors import (
    BillNotFoundError,
    EmptyLedgerError,
    EntryNotFoundError,
    InvalidAmountError,
    LedgerError,
    PersistenceFailure,
)
from .intents import CreateEntryIntent, EditEntryIntent, Intent, ReassignIntent
from .ledger import Entry, FlatLedger, GroupedLedger, SessionCategorySet, generate_entry_id

__all__ = [
    "BillNotFoundError",
    "CreateEntryIntent",
    "EditEntryIntent",
    "EmptyLedgerError",
    "Entry",
    "EntryNotFoundError",
    "FlatLedger",
    "GroupedLedger",
    "Intent",
    "InvalidAmountError",
    "LedgerError",
    "PersistenceFailure",
    "ReassignIntent",
    "SessionCategorySet",
    "generate_entry_id",
]
