"""Bill store protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.bill import Bill


class BillRepository(Protocol):
    """Persistent store of bills, keyed by id and scoped by owner."""

    def get(self, bill_id: str) -> Bill:
        """Return the bill or raise ``BillNotFoundError``."""
        ...

    def list_by_owner(self, owner_id: str) -> list[Bill]:
        """List an owner's bills, newest first."""
        ...

    def create(self, bill_id: str, name: str, raw_text: str, owner_id: str) -> Bill:
        """Insert a new bill."""
        ...

    def update(self, bill_id: str, name: str, raw_text: str) -> Bill:
        """Replace a bill's name and text."""
        ...

    def delete(self, bill_id: str) -> None:
        """Delete a bill by id or raise ``BillNotFoundError``."""
        ...
