"""Budget utilization for the proportional chart overlay."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ..constants import BUDGET_STATUS_COLORS, BUDGET_WARN_RATIO
from ..domain.ledger import GroupedLedger
from .layout import DisplayMode, LayoutResult
from .ledger_service import category_totals


@dataclass(slots=True)
class BudgetUsage:
    """Spent vs limit for one category."""

    category: str
    spent: Decimal
    limit: Optional[Decimal]

    @property
    def ratio(self) -> Optional[float]:
        if self.limit is None:
            return None
        if self.limit == 0:
            return float("inf") if self.spent > 0 else 0.0
        return float(self.spent / self.limit)

    @property
    def status(self) -> str:
        ratio = self.ratio
        if ratio is None:
            return "none"
        if ratio > 1:
            return "over"
        if ratio >= BUDGET_WARN_RATIO:
            return "warn"
        return "ok"

    @property
    def color(self) -> str:
        return BUDGET_STATUS_COLORS[self.status]

    @property
    def remaining(self) -> Optional[Decimal]:
        return None if self.limit is None else self.limit - self.spent


def compute_utilization(
    *,
    ledger: GroupedLedger,
    budgets: Mapping[str, Decimal],
    categories: Optional[Iterable[str]] = None,
) -> list[BudgetUsage]:
    """One ``BudgetUsage`` per category (``categories`` order, else ledger order)."""

    totals = category_totals(ledger)
    order = list(categories) if categories is not None else list(totals)
    return [
        BudgetUsage(
            category=category,
            spent=totals.get(category, Decimal("0")),
            limit=budgets.get(category),
        )
        for category in order
    ]


@dataclass(frozen=True, slots=True)
class BudgetMark:
    """Horizontal limit line across one lane, in plot-space pixels."""

    category: str
    x: float
    width: float
    y: float
    status: str


def budget_marks(layout: LayoutResult, usages: Iterable[BudgetUsage]) -> list[BudgetMark]:
    """Place limit lines on a proportional layout; uniform layouts get none."""

    if layout.mode is not DisplayMode.PROPORTIONAL:
        return []
    marks: list[BudgetMark] = []
    for usage in usages:
        lane = layout.lane_for(usage.category)
        if lane is None or usage.limit is None:
            continue
        # Limits above the axis are pinned to the top edge.
        y = max(0.0, layout.scale_y(float(usage.limit)))
        marks.append(BudgetMark(usage.category, lane.x, lane.width, y, usage.status))
    return marks


__all__ = ["BudgetMark", "BudgetUsage", "budget_marks", "compute_utilization"]
