"""SQLModel table exports."""

from .bill import Bill
from .budget import CategoryBudget
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "Bill",
    "CategoryBudget",
]
