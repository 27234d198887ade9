"""Budget store protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol


class BudgetRepository(Protocol):
    """Key/value store of per-category spending limits."""

    def get(self, category: str) -> Optional[Decimal]:
        """Return the limit for ``category`` or None when unset."""
        ...

    def set(self, category: str, limit: Decimal) -> None:
        """Store a non-negative limit for ``category``."""
        ...

    def delete(self, category: str) -> None:
        ...

    def list_all(self) -> dict[str, Decimal]:
        ...
