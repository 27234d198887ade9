"""Shared chart constants used by the layout engine and renderers."""

from __future__ import annotations

# Stack-domain height of one entry in uniform mode.
SEGMENT_HEIGHT = 25

# Pixel band kept free above uniform stacks for the click-to-add gesture.
EMPTY_BAND = 30

# Inner and outer lane padding, as a fraction of the lane step.
LANE_PADDING = 0.15

# Plot margins (top, right, bottom, left) in pixels.
CHART_MARGINS: tuple[int, int, int, int] = (40, 40, 120, 80)

MIN_CHART_WIDTH = 600
SCREEN_HEIGHT_FRACTION = 0.7

# Cyclic palette for proportional mode; colour carries no magnitude there.
PROPORTIONAL_PALETTE: list[str] = [
    "#EBDFC5",
    "#E8BC8F",
    "#DB6A3E",
    "#81B7C3",
    "#7788A2",
]

HUE_SATURATION = 70
HUE_LIGHTNESS = 50

# Budget utilization thresholds (fraction of the limit).
BUDGET_WARN_RATIO = 0.9

BUDGET_STATUS_COLORS = {
    "ok": "#22C55E",
    "warn": "#F59E0B",
    "over": "#EF4444",
    "none": "#94A3B8",
}
