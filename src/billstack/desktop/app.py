"""Main Flet desktop application entry point."""

from __future__ import annotations

import flet as ft

from ..devtools import dev_log
from ..domain.errors import LedgerError
from ..logging_config import session_log_path, setup_logging
from .components import show_snack
from .context import AppContext, create_app_context
from .navigation import DEFAULT_ROUTE, Router
from .views.bills import build_bills_view
from .views.chart import build_chart_view


def handle_shortcut(ctx: AppContext, page: ft.Page, key: str, ctrl: bool, shift: bool) -> bool:
    """Ctrl+Z undo, Ctrl+Shift+Z / Ctrl+Y redo, Ctrl+B bill list."""

    if not ctrl:
        return False
    key = (key or "").upper()
    if key == "B":
        page.go("/bills")
        return True
    editor = ctx.editor
    if editor is None or page.route != "/chart":
        return False
    try:
        if key == "Z" and not shift:
            return editor.undo()
        if (key == "Z" and shift) or key == "Y":
            return editor.redo()
    except LedgerError as exc:
        show_snack(page, str(exc))
        return True
    return False


def main(page: ft.Page) -> None:
    """Main entry point for the Flet desktop app."""

    ctx = create_app_context()

    logger = setup_logging(ctx.config)
    logger.info("BillStack desktop application starting")

    def on_page_close(_):
        logger.info("Application closing, flushing pending saves")
        if ctx.dispatcher is not None:
            ctx.dispatcher.shutdown(wait=True)
        slp = session_log_path()
        if slp:
            logger.info(f"Debug session log saved to: {slp}")

    page.on_close = on_page_close

    ctx.page = page
    page.title = "BillStack (DEV)" if ctx.dev_mode else "BillStack"
    if ctx.dev_mode:
        dev_log(ctx.config, "Dev mode enabled", context={"data_dir": ctx.config.DATA_DIR})
    page.padding = 0
    page.window_width = 1280
    page.window_height = 800
    page.window_min_width = 1024
    page.window_min_height = 600

    router = Router(page, ctx)
    route_builders = {
        "/": build_bills_view,
        "/bills": build_bills_view,
        "/chart": build_chart_view,
    }
    for route, builder in route_builders.items():
        router.register(route, builder)

    page.on_route_change = router.route_change
    page.on_view_pop = router.view_pop

    def _on_error(e: ft.ControlEvent):  # pragma: no cover (UI callback)
        msg = getattr(e, "data", None) or "<no-data>"
        logger.error("Flet page error", extra={"event": "error", "data": msg})
        show_snack(page, f"UI error: {msg}")

    page.on_error = _on_error

    def handle_keyboard(e: ft.KeyboardEvent):
        handle_shortcut(ctx, page, e.key, e.ctrl or e.meta, e.shift)

    page.on_keyboard_event = handle_keyboard

    page.go(DEFAULT_ROUTE)


if __name__ == "__main__":
    ft.app(target=main)
