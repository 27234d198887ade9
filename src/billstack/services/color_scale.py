"""Quantile-based amount -> hue mapping for the uniform chart.

Small, common amounts get most of the green-to-red range; outliers above the
90th percentile share the last tenth of it.
"""

from __future__ import annotations

import colorsys
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from ..constants import HUE_LIGHTNESS, HUE_SATURATION

MIDPOINT = 0.5


def _nearest_rank(sorted_values: Sequence[float], p: float) -> float:
    # floor(p * (n - 1)), not floor(p * n): p90 of [10, 10, 10, 50] is 10, not 50.
    return sorted_values[math.floor(p * (len(sorted_values) - 1))]


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / (denominator if denominator != 0 else 1.0)


@dataclass(frozen=True, slots=True)
class ColorScale:
    """Callable mapping an amount to a hue in degrees (120 green .. 0 red)."""

    minimum: float
    maximum: float
    p25: float
    p50: float
    p75: float
    p90: float
    degenerate: bool = False

    def position(self, amount) -> float:
        """Return ``t`` in [0, 1] for ``amount``."""
        if self.degenerate:
            return MIDPOINT
        value = float(amount)
        if value <= self.p25:
            t = 0.25 * _ratio(value - self.minimum, self.p25 - self.minimum)
        elif value <= self.p50:
            t = 0.25 + 0.25 * math.sqrt(_ratio(value - self.p25, self.p50 - self.p25))
        elif value <= self.p75:
            t = 0.5 + 0.25 * math.sqrt(_ratio(value - self.p50, self.p75 - self.p50))
        elif value <= self.p90:
            t = 0.75 + 0.15 * math.sqrt(_ratio(value - self.p75, self.p90 - self.p75))
        else:
            t = 0.9 + 0.1 * math.sqrt(_ratio(value - self.p90, self.maximum - self.p90))
        return min(1.0, max(0.0, t))

    def hue(self, amount) -> float:
        return 120.0 * (1.0 - self.position(amount))

    __call__ = hue

    def css(self, amount) -> str:
        return hsl_css(self.hue(amount))

    def hex(self, amount) -> str:
        return hsl_to_hex(self.hue(amount))


def build_color_scale(amounts: Iterable[Decimal | float]) -> ColorScale:
    values = sorted(float(a) for a in amounts)
    if not values or values[0] == values[-1]:
        anchor = values[0] if values else 0.0
        return ColorScale(anchor, anchor, anchor, anchor, anchor, anchor, degenerate=True)
    return ColorScale(
        minimum=values[0],
        maximum=values[-1],
        p25=_nearest_rank(values, 0.25),
        p50=_nearest_rank(values, 0.5),
        p75=_nearest_rank(values, 0.75),
        p90=_nearest_rank(values, 0.9),
    )


def hsl_css(hue: float) -> str:
    return f"hsl({hue:g}, {HUE_SATURATION}%, {HUE_LIGHTNESS}%)"


def hsl_to_hex(hue: float, saturation: float = HUE_SATURATION, lightness: float = HUE_LIGHTNESS) -> str:
    """Convert HSL (degrees, percent, percent) to ``#rrggbb``."""

    red, green, blue = colorsys.hls_to_rgb(hue / 360.0, lightness / 100.0, saturation / 100.0)
    return "#{:02x}{:02x}{:02x}".format(round(red * 255), round(green * 255), round(blue * 255))


__all__ = ["ColorScale", "build_color_scale", "hsl_css", "hsl_to_hex"]
