"""Flet canvas shapes for a segment layout plus the live drag state."""

from __future__ import annotations

from typing import Iterable, Optional

import flet as ft
import flet.canvas as cv

from ...constants import BUDGET_STATUS_COLORS
from ...services.budgeting import BudgetMark
from ...services.layout import DisplayMode, LayoutResult
from ..interaction import IDLE_SNAPSHOT, InteractionSnapshot

LABEL_COLOR = "#2D3748"
AXIS_COLOR = "#64748B"
GRID_COLOR = "#E5E7EB"
BAND_COLOR = "#CBD5E1"
HOVER_COLOR = "#3B82F6"


def _truncate(text: str, width_px: float, char_px: float = 5.5) -> str:
    max_chars = max(0, int(width_px / char_px))
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - 2)] + ".."


def build_segment_shapes(
    layout: LayoutResult,
    snapshot: InteractionSnapshot = IDLE_SNAPSHOT,
    *,
    budget_marks: Optional[Iterable[BudgetMark]] = None,
    currency: str = "$",
) -> list[cv.Shape]:
    """Translate plot-space geometry into canvas shapes (chart space)."""

    top, _right, _bottom, left = layout.viewport.margins
    plot_w, plot_h = layout.viewport.plot_width, layout.viewport.plot_height
    uniform = layout.mode is DisplayMode.UNIFORM
    shapes: list[cv.Shape] = []

    if not uniform:
        for tick in layout.ticks:
            y = top + layout.scale_y(tick)
            shapes.append(
                cv.Line(left, y, left + plot_w, y, paint=ft.Paint(color=GRID_COLOR, stroke_width=0.5))
            )
            shapes.append(
                cv.Text(
                    left - 8,
                    y,
                    f"{currency}{tick:g}",
                    style=ft.TextStyle(size=11, color=AXIS_COLOR),
                    alignment=ft.alignment.center_right,
                )
            )

    drop_target = snapshot.drop_target
    for lane in layout.lanes:
        if lane.category == drop_target:
            shapes.append(
                cv.Rect(
                    left + lane.x,
                    top,
                    lane.width,
                    plot_h,
                    border_radius=6,
                    paint=ft.Paint(color=ft.Colors.with_opacity(0.12, HOVER_COLOR)),
                )
            )
        if uniform:
            shapes.append(
                cv.Rect(
                    left + lane.x,
                    top + lane.band_top,
                    lane.width,
                    lane.band_bottom - lane.band_top,
                    border_radius=6,
                    paint=ft.Paint(color=BAND_COLOR, stroke_width=1, style=ft.PaintingStyle.STROKE),
                )
            )
        shapes.append(
            cv.Text(
                left + lane.center_x,
                top + plot_h + 10,
                lane.category,
                style=ft.TextStyle(size=12, color=AXIS_COLOR, weight=ft.FontWeight.W_500),
                alignment=ft.alignment.top_center,
            )
        )

    for segment in layout.segments:
        if segment.entry.id == snapshot.hidden_entry_id:
            continue
        shapes.append(
            cv.Rect(
                left + segment.x,
                top + segment.top,
                segment.width,
                segment.height,
                border_radius=6,
                paint=ft.Paint(color=segment.color),
            )
        )
        cx, cy = segment.center
        label = segment.entry.description or ""
        if label and segment.height > (15 if uniform else 25):
            shapes.append(
                cv.Text(
                    left + cx,
                    top + cy,
                    _truncate(label, segment.width),
                    style=ft.TextStyle(size=9 if uniform else 11, color=LABEL_COLOR),
                    alignment=ft.alignment.center,
                )
            )
        elif not uniform and 15 < segment.height <= 25:
            shapes.append(
                cv.Text(
                    left + cx,
                    top + cy,
                    f"{currency}{segment.entry.amount:.0f}",
                    style=ft.TextStyle(size=9, color="#4A5568", weight=ft.FontWeight.W_600),
                    alignment=ft.alignment.center,
                )
            )

    for mark in budget_marks or ():
        shapes.append(
            cv.Line(
                left + mark.x,
                top + mark.y,
                left + mark.x + mark.width,
                top + mark.y,
                paint=ft.Paint(
                    color=BUDGET_STATUS_COLORS.get(mark.status, BUDGET_STATUS_COLORS["none"]),
                    stroke_width=2,
                ),
            )
        )

    preview = snapshot.preview
    if preview is not None:
        shapes.append(
            cv.Rect(
                left + preview.x,
                top + preview.y,
                preview.width,
                preview.height,
                border_radius=6,
                paint=ft.Paint(color=ft.Colors.with_opacity(0.75, preview.color)),
            )
        )
    return shapes


__all__ = ["build_segment_shapes"]
