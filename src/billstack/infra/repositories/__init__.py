"""Repository implementations backed by SQLModel."""

from .bill import SQLModelBillRepository
from .budget import SQLModelBudgetRepository
from .settings import SQLModelSettingsRepository

__all__ = [
    "SQLModelBillRepository",
    "SQLModelBudgetRepository",
    "SQLModelSettingsRepository",
]
