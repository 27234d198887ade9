"""Navigation and routing for Flet desktop app."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

import flet as ft

if TYPE_CHECKING:
    from .context import AppContext

from ..devtools import dev_log
from ..logging_config import get_logger

logger = get_logger(__name__)

# View builder type
ViewBuilder = Callable[["AppContext", ft.Page], ft.View]

DEFAULT_ROUTE = "/bills"


class Router:
    """Handles routing and navigation for the Flet app."""

    def __init__(self, page: ft.Page, context: AppContext):
        self.page = page
        self.context = context
        self.routes: Dict[str, ViewBuilder] = {}

    def register(self, route: str, builder: ViewBuilder) -> None:
        logger.debug(f"Registering route: {route}")
        self.routes[route] = builder

    def route_change(self, e: ft.RouteChangeEvent) -> None:
        """Build the view for ``e.route``; unknown routes fall back to the bill list."""
        route = e.route or "/"
        logger.info(f"Route change requested: {route}")

        if route == "/chart" and self.context.current_bill_id is None:
            logger.warning("Chart route blocked - no bill selected")
            route = DEFAULT_ROUTE

        if route not in self.routes:
            logger.warning(f"Route not in registered routes: {route}, defaulting to {DEFAULT_ROUTE}")
            route = DEFAULT_ROUTE

        builder = self.routes[route]
        try:
            view = builder(self.context, self.page)
            if self.page.views:
                self.page.views[-1] = view
            else:
                self.page.views.append(view)
            self.page.update()
        except Exception as ex:
            logger.error(f"Failed to build view for route {route}: {ex}", exc_info=True)
            dev_log(self.context.config, "Route load failed", exc=ex, context={"route": route})
            self.show_error(f"Error loading view: {ex}")

    def view_pop(self, e: ft.ViewPopEvent) -> None:
        self.page.views.pop()
        top_view = self.page.views[-1]
        self.page.go(top_view.route)

    def show_error(self, message: str) -> None:
        dialog = ft.AlertDialog(
            title=ft.Text("Error"),
            content=ft.Text(message),
            actions=[ft.TextButton("OK", on_click=lambda _: self.close_dialog(dialog))],
        )
        self.page.dialog = dialog
        dialog.open = True
        self.page.update()

    def close_dialog(self, dialog: ft.AlertDialog) -> None:
        dialog.open = False
        self.page.update()
