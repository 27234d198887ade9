"""Repository protocol definitions for domain layer."""

from .bill import BillRepository
from .budget import BudgetRepository

__all__ = [
    "BillRepository",
    "BudgetRepository",
]
