"""Static PNG rendering of a segment layout (CLI export and chart thumbnails)."""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterable, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch

from billstack.constants import BUDGET_STATUS_COLORS
from billstack.services.budgeting import BudgetMark
from billstack.services.layout import DisplayMode, LayoutResult

_DPI = 100


def _save(fig, out_path: Optional[Path]) -> Path:
    if out_path is not None:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=_DPI)
        path = out_path
    else:
        with NamedTemporaryFile(delete=False, suffix=".png") as tmp:
            fig.savefig(tmp.name, dpi=_DPI)
            path = Path(tmp.name)
    plt.close(fig)
    return path


def _truncate(text: str, width_px: float, char_px: float = 5.5) -> str:
    max_chars = max(0, int(width_px / char_px))
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - 2)] + ".."


def segment_chart_png(
    layout: LayoutResult,
    *,
    budget_marks: Iterable[BudgetMark] | None = None,
    currency: str = "$",
    out_path: Optional[Path] = None,
) -> Path:
    """Draw lanes and segments of ``layout`` and return the PNG path."""

    viewport = layout.viewport
    fig = plt.figure(figsize=(viewport.width / _DPI, viewport.height / _DPI), dpi=_DPI)

    if not layout.lanes:
        ax = fig.add_subplot(111)
        ax.text(0.5, 0.5, "No bill data yet\nAdd a line like 'Groceries: 10, 16'",
                ha="center", va="center", fontsize=12, color="#999")
        ax.axis("off")
        return _save(fig, out_path)

    top, right, bottom, left = viewport.margins
    plot_w, plot_h = viewport.plot_width, viewport.plot_height
    ax = fig.add_axes(
        (left / viewport.width, bottom / viewport.height, plot_w / viewport.width, plot_h / viewport.height)
    )
    ax.set_xlim(0, plot_w)
    # Pixel rows grow downward, like the layout coordinates.
    ax.set_ylim(plot_h, 0)

    uniform = layout.mode is DisplayMode.UNIFORM
    for segment in layout.segments:
        ax.add_patch(
            FancyBboxPatch(
                (segment.x, segment.top),
                segment.width,
                segment.height,
                boxstyle="round,pad=0,rounding_size=4",
                facecolor=segment.color,
                edgecolor="white",
                linewidth=1.2,
            )
        )
        label = segment.entry.description or ""
        min_height = 15 if uniform else 25
        if label and segment.height > min_height:
            cx, cy = segment.center
            ax.text(cx, cy, _truncate(label, segment.width), ha="center", va="center",
                    fontsize=8 if uniform else 9, color="#2D3748")
        elif not uniform and 15 < segment.height <= 25:
            cx, cy = segment.center
            ax.text(cx, cy, f"{currency}{segment.entry.amount:.0f}", ha="center", va="center",
                    fontsize=7, color="#4A5568", fontweight="bold")

    if uniform:
        for lane in layout.lanes:
            ax.add_patch(
                FancyBboxPatch(
                    (lane.x, lane.band_top),
                    lane.width,
                    lane.band_bottom - lane.band_top,
                    boxstyle="round,pad=0,rounding_size=4",
                    facecolor="none",
                    edgecolor="#CBD5E1",
                    linestyle="--",
                    linewidth=0.8,
                )
            )
        ax.set_yticks([])
    else:
        ticks = layout.ticks
        ax.set_yticks([layout.scale_y(t) for t in ticks])
        ax.set_yticklabels([f"{currency}{t:g}" for t in ticks], fontsize=9, color="#64748B")
        for tick in ticks:
            ax.axhline(layout.scale_y(tick), color="#E5E7EB", linestyle=":", linewidth=0.5, zorder=0)

    for mark in budget_marks or ():
        ax.hlines(mark.y, mark.x, mark.x + mark.width,
                  colors=BUDGET_STATUS_COLORS.get(mark.status, "#94A3B8"), linewidth=2, linestyles="--")

    ax.set_xticks([lane.center_x for lane in layout.lanes])
    ax.set_xticklabels([lane.category for lane in layout.lanes], rotation=-45, ha="left", fontsize=10)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)
    return _save(fig, out_path)


__all__ = ["segment_chart_png"]
