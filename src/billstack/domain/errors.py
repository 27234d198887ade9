"""Exceptions raised by ledger operations and collaborators."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for BillStack errors that the UI reports to the user."""


class EmptyLedgerError(LedgerError):
    """Raised by callers that require at least one parsed category."""

    def __init__(self, message: str = "no valid data found") -> None:
        super().__init__(message)


class EntryNotFoundError(LedgerError, KeyError):
    """No entry with the requested id exists in the ledger."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"entry not found: {self.entry_id}"


class InvalidAmountError(LedgerError, ValueError):
    """Amounts must be positive decimals."""


class InvalidDescriptionError(LedgerError, ValueError):
    """The note cannot be written back into ledger text."""


class InvalidCategoryError(LedgerError, ValueError):
    """Category names must be non-empty and free of colons and line breaks."""


class InvalidSettingError(LedgerError, ValueError):
    """A preference value was rejected before being stored."""


class BillNotFoundError(LedgerError, LookupError):
    """The bill store has no row for the requested id."""

    def __init__(self, bill_id: str) -> None:
        super().__init__(f"bill not found: {bill_id}")
        self.bill_id = bill_id


class PersistenceFailure(LedgerError):
    """A store write was rejected; the local change is kept but unsynced.

    The original store exception is available as ``__cause__``.
    """

    def __init__(self, bill_id: str, message: str) -> None:
        super().__init__(message)
        self.bill_id = bill_id


__all__ = [
    "BillNotFoundError",
    "EmptyLedgerError",
    "EntryNotFoundError",
    "InvalidAmountError",
    "InvalidCategoryError",
    "InvalidDescriptionError",
    "InvalidSettingError",
    "LedgerError",
    "PersistenceFailure",
]
