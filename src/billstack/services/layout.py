"""Segment layout for the stacked bill chart.

Two strategies share one lane geometry:

* uniform ("edit"): every entry is ``SEGMENT_HEIGHT`` tall and coloured by
  the quantile colour scale; a band above each stack is kept free for the
  click-to-add gesture.
* proportional ("preview"): entry height equals its amount and colour comes
  from a fixed palette cycled by global rank.

All coordinates on ``Segment``/``Lane`` are plot-space pixels (origin at the
top-left of the plot area, y growing downward). ``y0``/``y1`` are the
stack-domain values before scaling.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence

from matplotlib.ticker import MaxNLocator

from ..constants import (
    CHART_MARGINS,
    EMPTY_BAND,
    LANE_PADDING,
    MIN_CHART_WIDTH,
    PROPORTIONAL_PALETTE,
    SCREEN_HEIGHT_FRACTION,
    SEGMENT_HEIGHT,
)
from ..domain.ledger import Entry, GroupedLedger
from .color_scale import build_color_scale


class DisplayMode(str, Enum):
    UNIFORM = "uniform"
    PROPORTIONAL = "proportional"

    @classmethod
    def parse(cls, value: "DisplayMode | str") -> "DisplayMode":
        """Accept enum members, their values, or the ``edit``/``preview`` aliases."""
        if isinstance(value, DisplayMode):
            return value
        lowered = str(value).strip().lower()
        aliases = {"edit": cls.UNIFORM, "preview": cls.PROPORTIONAL}
        if lowered in aliases:
            return aliases[lowered]
        return cls(lowered)


@dataclass(frozen=True, slots=True)
class Viewport:
    """Total chart size in pixels plus margins ``(top, right, bottom, left)``."""

    width: float
    height: float
    margins: tuple[int, int, int, int] = CHART_MARGINS

    @property
    def plot_width(self) -> float:
        top, right, bottom, left = self.margins
        return max(0.0, self.width - left - right)

    @property
    def plot_height(self) -> float:
        top, right, bottom, left = self.margins
        return max(0.0, self.height - top - bottom)

    def to_plot(self, x: float, y: float) -> tuple[float, float]:
        """Translate a point from chart space into plot space."""
        top, _right, _bottom, left = self.margins
        return x - left, y - top


@dataclass(frozen=True, slots=True)
class Lane:
    category: str
    index: int
    x: float
    width: float
    # Click-to-add band; zero height in proportional mode.
    band_top: float = 0.0
    band_bottom: float = 0.0

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def contains_x(self, x: float) -> bool:
        return self.x <= x <= self.x + self.width

    def in_empty_band(self, x: float, y: float) -> bool:
        return self.contains_x(x) and self.band_top <= y <= self.band_bottom


@dataclass(frozen=True, slots=True)
class Segment:
    entry: Entry
    category: str
    y0: float
    y1: float
    x: float
    width: float
    top: float
    bottom: float
    color: str
    index: int

    @property
    def height(self) -> float:
        return max(0.0, self.bottom - self.top)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, (self.top + self.bottom) / 2

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.top <= y <= self.bottom


@dataclass(slots=True)
class LayoutResult:
    segments: list[Segment]
    lanes: list[Lane]
    mode: DisplayMode
    viewport: Viewport
    domain_max: float
    ticks: list[float] = field(default_factory=list)

    def lane_for(self, category: str) -> Optional[Lane]:
        for lane in self.lanes:
            if lane.category == category:
                return lane
        return None

    def segment_for(self, entry_id: str) -> Optional[Segment]:
        for segment in self.segments:
            if segment.entry.id == entry_id:
                return segment
        return None

    def segments_in(self, category: str) -> list[Segment]:
        return [s for s in self.segments if s.category == category]

    def scale_y(self, value: float) -> float:
        """Map a stack-domain value to a plot-space pixel row."""
        return _linear(value, self.domain_max, self._range_top(), self.viewport.plot_height)

    def _range_top(self) -> float:
        return float(EMPTY_BAND) if self.mode is DisplayMode.UNIFORM else 0.0


def _linear(value: float, domain_max: float, range_top: float, range_bottom: float) -> float:
    if domain_max <= 0:
        return range_bottom
    return range_bottom - (value / domain_max) * (range_bottom - range_top)


def band_positions(count: int, width: float, padding: float = LANE_PADDING) -> tuple[list[float], float]:
    """Band scale with equal inner/outer padding, centred in ``[0, width]``.

    Returns the left edge of every band and the shared bandwidth.
    """

    if count <= 0:
        return [], 0.0
    step = width / max(1.0, count - padding + 2 * padding)
    bandwidth = step * (1 - padding)
    start = (width - step * (count - padding)) * 0.5
    return [start + i * step for i in range(count)], bandwidth


def resolve_category_order(ledger: GroupedLedger, category_order: Iterable[str]) -> list[str]:
    """Requested order, de-duplicated, with ledger categories missing from it appended."""

    order: list[str] = []
    for category in list(category_order) + ledger.categories():
        if category not in order:
            order.append(category)
    return order


def nice_upper_bound(value: float, bins: int = 10) -> float:
    """Round ``value`` up to a tick-friendly number."""

    if value <= 0:
        return 1.0
    ticks = MaxNLocator(nbins=bins, steps=[1, 2, 2.5, 5, 10]).tick_values(0.0, value)
    covering = [float(t) for t in ticks if t >= value]
    return min(covering) if covering else float(value)


def nice_ticks(upper: float, count: int = 6) -> list[float]:
    ticks = MaxNLocator(nbins=count, steps=[1, 2, 2.5, 5, 10]).tick_values(0.0, upper)
    return [float(t) for t in ticks if 0 <= t <= upper]


def layout_ledger(
    ledger: GroupedLedger,
    category_order: Sequence[str],
    mode: DisplayMode | str,
    viewport: Viewport,
) -> LayoutResult:
    """Compute lanes and segments for ``ledger``. Pure function."""

    mode = DisplayMode.parse(mode)
    order = resolve_category_order(ledger, category_order)
    lefts, bandwidth = band_positions(len(order), viewport.plot_width)
    plot_height = viewport.plot_height

    if mode is DisplayMode.UNIFORM:
        return _layout_uniform(ledger, order, lefts, bandwidth, viewport, plot_height)
    return _layout_proportional(ledger, order, lefts, bandwidth, viewport, plot_height)


def _layout_uniform(ledger, order, lefts, bandwidth, viewport, plot_height) -> LayoutResult:
    scale = build_color_scale(e.amount for e in ledger.entries())
    max_count = max([len(ledger.get(c, [])) for c in order] + [1])
    domain_max = float(max_count * SEGMENT_HEIGHT)

    segments: list[Segment] = []
    lanes: list[Lane] = []
    for lane_index, (category, left) in enumerate(zip(order, lefts)):
        highest_top: Optional[float] = None
        for index, entry in enumerate(ledger.get(category, [])):
            y0 = float(index * SEGMENT_HEIGHT)
            y1 = y0 + SEGMENT_HEIGHT
            top = _linear(y1, domain_max, EMPTY_BAND, plot_height)
            bottom = _linear(y0, domain_max, EMPTY_BAND, plot_height)
            segments.append(
                Segment(
                    entry=entry,
                    category=category,
                    y0=y0,
                    y1=y1,
                    x=left,
                    width=bandwidth,
                    top=top,
                    bottom=bottom,
                    color=scale.hex(entry.amount),
                    index=index,
                )
            )
            highest_top = top
        band_bottom = highest_top if highest_top is not None else float(EMPTY_BAND)
        band_bottom = max(band_bottom, float(EMPTY_BAND))
        lanes.append(Lane(category, lane_index, left, bandwidth, 0.0, band_bottom))

    return LayoutResult(segments, lanes, DisplayMode.UNIFORM, viewport, domain_max)


def _layout_proportional(ledger, order, lefts, bandwidth, viewport, plot_height) -> LayoutResult:
    totals = [
        float(sum((e.amount for e in ledger.get(c, [])), Decimal("0"))) for c in order
    ]
    max_total = max(totals + [0.0])
    pad = 0.05 if max_total < 100 else 0.1
    domain_max = nice_upper_bound(max_total * (1 + pad))

    segments: list[Segment] = []
    lanes: list[Lane] = []
    rank = 0
    for lane_index, (category, left) in enumerate(zip(order, lefts)):
        y0 = 0.0
        for index, entry in enumerate(ledger.get(category, [])):
            y1 = y0 + float(entry.amount)
            segments.append(
                Segment(
                    entry=entry,
                    category=category,
                    y0=y0,
                    y1=y1,
                    x=left,
                    width=bandwidth,
                    top=_linear(y1, domain_max, 0.0, plot_height),
                    bottom=_linear(y0, domain_max, 0.0, plot_height),
                    color=PROPORTIONAL_PALETTE[rank % len(PROPORTIONAL_PALETTE)],
                    index=index,
                )
            )
            rank += 1
            y0 = y1
        lanes.append(Lane(category, lane_index, left, bandwidth))

    return LayoutResult(
        segments,
        lanes,
        DisplayMode.PROPORTIONAL,
        viewport,
        domain_max,
        ticks=nice_ticks(domain_max),
    )


def auto_viewport(
    ledger: GroupedLedger,
    mode: DisplayMode | str,
    max_width: float,
    max_height: float,
    margins: tuple[int, int, int, int] = CHART_MARGINS,
) -> Viewport:
    """Pick a chart size for ``ledger`` that fits the available screen.

    ``max_height`` is the screen height; the chart never exceeds 70% of it.
    """

    mode = DisplayMode.parse(mode)
    width = max(float(max_width), float(MIN_CHART_WIDTH))
    cap = max_height * SCREEN_HEIGHT_FRACTION
    if mode is DisplayMode.UNIFORM:
        max_count = max([len(entries) for entries in ledger.values()] + [1])
        height = min(200 + max_count * SEGMENT_HEIGHT + 100, cap)
    else:
        max_total = max(
            [float(sum((e.amount for e in entries), Decimal("0"))) for entries in ledger.values()]
            + [0.0]
        )
        data_height = max(max_total * 2, 300) if max_total > 0 else 300
        height = min(400 + len(ledger) * 80 + data_height, cap)
    return Viewport(width=width, height=math.floor(height), margins=margins)


__all__ = [
    "DisplayMode",
    "Lane",
    "LayoutResult",
    "Segment",
    "Viewport",
    "auto_viewport",
    "band_positions",
    "layout_ledger",
    "nice_upper_bound",
    "resolve_category_order",
]
