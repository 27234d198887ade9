"""SQLModel implementation of the budget store."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlmodel import select

from ...domain.errors import InvalidAmountError
from ...models.budget import CategoryBudget
from ..database import SessionFactory


class SQLModelBudgetRepository:
    """Category -> limit store backed by the ``category_budget`` table."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, category: str) -> Optional[Decimal]:
        with self.session_factory() as session:
            row = session.get(CategoryBudget, category)
            return Decimal(row.limit_amount) if row is not None else None

    def set(self, category: str, limit: Decimal) -> None:
        limit = Decimal(limit)
        if limit < 0:
            raise InvalidAmountError(f"budget limit must be >= 0, got {limit}")
        with self.session_factory() as session:
            row = session.get(CategoryBudget, category)
            if row is None:
                row = CategoryBudget(category=category, limit_amount=limit)
            else:
                row.limit_amount = limit
            session.add(row)
            session.commit()

    def delete(self, category: str) -> None:
        with self.session_factory() as session:
            row = session.get(CategoryBudget, category)
            if row is not None:
                session.delete(row)
                session.commit()

    def list_all(self) -> dict[str, Decimal]:
        """Return every stored limit keyed by category."""
        with self.session_factory() as session:
            rows = session.exec(select(CategoryBudget)).all()
            return {row.category: Decimal(row.limit_amount) for row in rows}


__all__ = ["SQLModelBudgetRepository"]
