"""Per-category budget limits."""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from sqlmodel import Field, SQLModel


class CategoryBudget(SQLModel, table=True):
    """Spending limit for one category, shared across bills."""

    __tablename__: ClassVar[str] = "category_budget"

    category: str = Field(primary_key=True, max_length=64)
    limit_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2, nullable=False)
