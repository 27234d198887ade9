"""Interactive chart view for the selected bill."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional

import flet as ft
import flet.canvas as cv

from ...devtools import dev_log
from ...domain.errors import InvalidAmountError, LedgerError, PersistenceFailure
from ...domain.intents import CreateEntryIntent, EditEntryIntent, Intent, ReassignIntent
from ...logging_config import get_logger
from ...services.budgeting import budget_marks, compute_utilization
from ...services.editor import BillEditor, run_inline
from ...services.layout import DisplayMode, LayoutResult, auto_viewport, layout_ledger
from ...services.ledger_service import category_totals, ledger_total
from ...services.parser import format_amount
from ..charts import segment_chart_png
from ..components import (
    build_segment_shapes,
    show_bill_dialog,
    show_budget_dialog,
    show_entry_dialog,
    show_snack,
)
from ..interaction import InteractionController, InteractionSnapshot

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

DEFAULT_SCREEN = (1280.0, 800.0)


def get_or_create_editor(ctx: AppContext, page: ft.Page) -> BillEditor:
    """Reuse the editor for the current bill so undo history survives re-renders."""

    if ctx.editor is not None and ctx.editor.bill_id == ctx.current_bill_id:
        return ctx.editor

    bill = ctx.bill_repo.get(ctx.current_bill_id)

    def _on_persist_error(failure: PersistenceFailure) -> None:
        dev_log(ctx.config, "Bill save failed", exc=failure.__cause__, context={"bill_id": failure.bill_id})
        show_snack(page, f"{failure} (changes kept locally, use Retry sync)")

    ctx.editor = BillEditor(
        ctx.bill_repo,
        bill.id,
        bill.name,
        bill.raw_text,
        dispatch=ctx.dispatcher or run_inline,
        on_persist_error=_on_persist_error,
        history_size=ctx.config.HISTORY_SIZE,
    )
    return ctx.editor


def build_chart_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the chart view for ``ctx.current_bill_id``."""

    editor = get_or_create_editor(ctx, page)

    # Listeners from a previous render of this view.
    for unsubscribe in ctx.extras.pop("chart_unsubscribers", []):
        unsubscribe()

    def _screen() -> tuple[float, float]:
        width = getattr(page, "width", None) or DEFAULT_SCREEN[0]
        height = getattr(page, "height", None) or DEFAULT_SCREEN[1]
        return float(width), float(height)

    def _compute_layout() -> LayoutResult:
        screen_w, screen_h = _screen()
        viewport = auto_viewport(editor.ledger, ctx.display_mode, screen_w - 360, screen_h)
        return layout_ledger(editor.ledger, editor.category_order, ctx.display_mode, viewport)

    def _budget_usages():
        return compute_utilization(
            ledger=editor.ledger,
            budgets=ctx.budget_repo.list_all(),
            categories=editor.category_order,
        )

    controller = InteractionController(_compute_layout())
    state: dict = {"pointer": None, "usages": _budget_usages()}

    def _shapes(snapshot: Optional[InteractionSnapshot] = None) -> list[cv.Shape]:
        layout = controller.layout
        marks = budget_marks(layout, state["usages"])
        return build_segment_shapes(
            layout,
            snapshot or controller.snapshot,
            budget_marks=marks,
            currency=ctx.currency,
        )

    # ------------------------------------------------------------ gestures
    def _to_plot(e) -> tuple[float, float]:
        return controller.layout.viewport.to_plot(e.local_x, e.local_y)

    def on_pan_start(e: ft.DragStartEvent):
        x, y = _to_plot(e)
        state["pointer"] = (x, y)
        controller.pointer_down(x, y)

    def on_pan_update(e: ft.DragUpdateEvent):
        x, y = _to_plot(e)
        state["pointer"] = (x, y)
        controller.pointer_move(x, y)

    def on_pan_end(_e: ft.DragEndEvent):
        # Drag end events carry no position; drop where the pointer was last seen.
        pointer = state.get("pointer")
        if pointer is None:
            controller.cancel()
            return
        controller.pointer_up(*pointer)
        state["pointer"] = None

    def on_tap_up(e: ft.TapEvent):
        controller.click(*_to_plot(e))

    def on_secondary_tap_up(e: ft.TapEvent):
        controller.secondary_click(*_to_plot(e))

    viewport = controller.layout.viewport
    canvas = cv.Canvas(
        shapes=_shapes(),
        width=viewport.width,
        height=viewport.height,
        content=ft.GestureDetector(
            mouse_cursor=ft.MouseCursor.GRAB if ctx.display_mode is DisplayMode.UNIFORM else ft.MouseCursor.BASIC,
            drag_interval=10,
            on_pan_start=on_pan_start,
            on_pan_update=on_pan_update,
            on_pan_end=on_pan_end,
            on_tap_up=on_tap_up,
            on_secondary_tap_up=on_secondary_tap_up,
        ),
    )

    # --------------------------------------------------------------- chrome
    title_text = ft.Text(editor.name, size=22, weight=ft.FontWeight.BOLD)
    total_text = ft.Text("", size=14, color=ft.Colors.ON_SURFACE_VARIANT)
    undo_button = ft.IconButton(icon=ft.Icons.UNDO, tooltip="Undo (Ctrl+Z)", on_click=lambda _: _undo())
    redo_button = ft.IconButton(icon=ft.Icons.REDO, tooltip="Redo (Ctrl+Shift+Z)", on_click=lambda _: _redo())
    sync_button = ft.TextButton(
        "Retry sync",
        icon=ft.Icons.SYNC_PROBLEM,
        visible=False,
        on_click=lambda _: editor.retry_persist(),
    )
    mode_selector = ft.SegmentedButton(
        selected={ctx.display_mode.value},
        segments=[
            ft.Segment(value=DisplayMode.UNIFORM.value, label=ft.Text("Edit")),
            ft.Segment(value=DisplayMode.PROPORTIONAL.value, label=ft.Text("Preview")),
        ],
        on_change=lambda e: _set_mode(next(iter(e.control.selected), DisplayMode.PROPORTIONAL.value)),
    )
    summary_column = ft.Column(spacing=6, scroll=ft.ScrollMode.AUTO, expand=True)
    budget_row = ft.Row(wrap=True, spacing=8)

    def _refresh_chrome() -> None:
        title_text.value = editor.name
        total_text.value = f"Total {ctx.currency}{format_amount(ledger_total(editor.ledger))}"
        undo_button.disabled = not editor.can_undo
        redo_button.disabled = not editor.can_redo
        sync_button.visible = editor.unsynced
        summary_column.controls = _summary_controls()
        budget_row.controls = _budget_controls()
        budget_row.visible = ctx.display_mode is DisplayMode.PROPORTIONAL

    def _summary_controls() -> list[ft.Control]:
        totals = category_totals(editor.ledger)
        controls: list[ft.Control] = []
        for category in editor.category_order:
            entries = editor.ledger.get(category, [])
            header = ft.Row(
                [
                    ft.Text(category, weight=ft.FontWeight.BOLD),
                    ft.Text(f"{ctx.currency}{format_amount(totals.get(category, Decimal('0')))}"),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            )
            controls.append(header)
            for entry in entries:
                label = f"{ctx.currency}{format_amount(entry.amount)}"
                if entry.description:
                    label += f"  {entry.description}"
                controls.append(
                    ft.TextButton(
                        label,
                        on_click=lambda _, entry=entry: _handle_intent(EditEntryIntent(entry=entry)),
                    )
                )
        return controls

    def _budget_controls() -> list[ft.Control]:
        chips: list[ft.Control] = []
        for usage in state["usages"]:
            limit = f"{ctx.currency}{format_amount(usage.limit)}" if usage.limit is not None else "no budget"
            chips.append(
                ft.Chip(
                    label=ft.Text(f"{usage.category}: {ctx.currency}{format_amount(usage.spent)} / {limit}"),
                    leading=ft.Icon(ft.Icons.CIRCLE, color=usage.color, size=12),
                    on_click=lambda _, category=usage.category, current=usage.limit: _edit_budget(category, current),
                )
            )
        return chips

    def _rerender() -> None:
        state["usages"] = _budget_usages()
        layout = _compute_layout()
        controller.update_layout(layout)
        canvas.width = layout.viewport.width
        canvas.height = layout.viewport.height
        canvas.shapes = _shapes()
        _refresh_chrome()
        page.update()

    def _on_snapshot(snapshot: InteractionSnapshot) -> None:
        canvas.shapes = _shapes(snapshot)
        page.update()

    def _on_sync_change(_editor: BillEditor) -> None:
        # Runs on the persistence worker; only the sync button may change here.
        sync_button.visible = editor.unsynced
        page.update()

    # -------------------------------------------------------------- actions
    def _guard(action, *args, **kwargs):
        try:
            return action(*args, **kwargs)
        except PersistenceFailure as exc:
            show_snack(page, f"{exc} (changes kept locally, use Retry sync)")
        except LedgerError as exc:
            logger.warning("Chart action rejected", extra={"error": str(exc)})
            show_snack(page, str(exc))
        return None

    def _handle_intent(intent: Intent) -> None:
        if isinstance(intent, ReassignIntent):
            _guard(editor.apply, intent)
        elif isinstance(intent, CreateEntryIntent):
            show_entry_dialog(
                page,
                category=intent.category,
                currency=ctx.currency,
                on_submit=lambda amount, description: editor.add_entry(intent.category, amount, description),
            )
        elif isinstance(intent, EditEntryIntent):
            entry_id = intent.entry.id
            show_entry_dialog(
                page,
                category=intent.entry.category,
                entry=intent.entry,
                currency=ctx.currency,
                on_submit=lambda amount, description: editor.update_entry(
                    entry_id, amount=amount, description=description
                ),
                on_delete=lambda: _guard(editor.delete_entry, entry_id),
            )

    def _undo() -> None:
        _guard(editor.undo)

    def _redo() -> None:
        _guard(editor.redo)

    def _set_mode(value: str) -> None:
        controller.cancel()
        ctx.set_display_mode(value)
        page.go("/chart")

    def _edit_text(_):
        def _submit(name: str, raw_text: str) -> None:
            editor.replace_text(raw_text)
            editor.rename(name)

        show_bill_dialog(page, on_submit=_submit, name=editor.name, raw_text=editor.raw_text, title="Edit bill")

    def _edit_budget(category: str, current: Optional[Decimal]) -> None:
        def _submit(value: Optional[str]) -> None:
            if value is None:
                ctx.budget_repo.delete(category)
            else:
                try:
                    limit = Decimal(value.replace(",", ""))
                except InvalidOperation as exc:
                    raise InvalidAmountError(f"invalid limit: {value!r}") from exc
                ctx.budget_repo.set(category, limit)
            _rerender()

        show_budget_dialog(page, category=category, current=current, on_submit=_submit, currency=ctx.currency)

    def _export(_):
        path = segment_chart_png(
            controller.layout,
            budget_marks=budget_marks(controller.layout, state["usages"]),
            currency=ctx.currency,
        )
        logger.info("Chart exported", extra={"path": str(path)})
        show_snack(page, f"Chart saved to {path}")

    def _on_resized(_e) -> None:
        _rerender()

    ctx.extras["chart_unsubscribers"] = [
        controller.subscribe(_on_snapshot),
        controller.on_intent(_handle_intent),
        editor.subscribe(lambda _editor: _rerender()),
        editor.subscribe_sync(_on_sync_change),
    ]
    page.on_resized = _on_resized
    _refresh_chrome()

    toolbar = ft.Row(
        [
            ft.IconButton(icon=ft.Icons.ARROW_BACK, tooltip="All bills", on_click=lambda _: page.go("/bills")),
            title_text,
            total_text,
            ft.Container(expand=True),
            sync_button,
            mode_selector,
            undo_button,
            redo_button,
            ft.IconButton(icon=ft.Icons.EDIT_NOTE, tooltip="Edit text", on_click=_edit_text),
            ft.IconButton(icon=ft.Icons.IMAGE, tooltip="Export PNG", on_click=_export),
        ],
        vertical_alignment=ft.CrossAxisAlignment.CENTER,
    )

    hint = ft.Text(
        "Drag a block to another lane to recategorize it. Click above a stack to add, right-click a block to edit."
        if ctx.display_mode is DisplayMode.UNIFORM
        else "Heights are proportional to amounts. Switch to Edit to rearrange.",
        size=12,
        color=ft.Colors.ON_SURFACE_VARIANT,
    )

    body = ft.Row(
        [
            ft.Column([canvas, budget_row], scroll=ft.ScrollMode.AUTO, expand=True),
            ft.Container(content=summary_column, width=320, padding=12),
        ],
        expand=True,
        vertical_alignment=ft.CrossAxisAlignment.START,
    )

    return ft.View(
        route="/chart",
        padding=16,
        controls=[toolbar, hint, ft.Divider(height=1), body],
    )


__all__ = ["build_chart_view", "get_or_create_editor"]
