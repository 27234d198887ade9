"""Dialogs for entries, bills, budgets and settings."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Optional

import flet as ft

from ...domain.errors import InvalidDescriptionError, LedgerError
from ...domain.ledger import Entry
from ...logging_config import get_logger
from ...services.parser import format_amount
from ...services.preferences import CURRENCY_OPTIONS

logger = get_logger(__name__)


def show_snack(page: ft.Page, message: str) -> None:
    page.snack_bar = ft.SnackBar(content=ft.Text(message))
    page.snack_bar.open = True
    page.update()


def _close(page: ft.Page, dialog: ft.AlertDialog) -> None:
    dialog.open = False
    page.dialog = None
    page.update()


def _open(page: ft.Page, dialog: ft.AlertDialog) -> None:
    page.dialog = dialog
    dialog.open = True
    page.update()


def show_confirm_dialog(page: ft.Page, title: str, message: str, on_confirm: Callable[[], None]) -> ft.AlertDialog:
    def handle_confirm(_):
        _close(page, dialog)
        on_confirm()

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=lambda _: _close(page, dialog)),
            ft.FilledButton("Confirm", on_click=handle_confirm),
        ],
    )
    _open(page, dialog)
    return dialog


def show_entry_dialog(
    page: ft.Page,
    *,
    category: str,
    on_submit: Callable[[str, Optional[str]], None],
    entry: Entry | None = None,
    on_delete: Optional[Callable[[], None]] = None,
    currency: str = "$",
) -> ft.AlertDialog:
    """Create (``entry`` is None) or edit/delete an entry.

    ``on_submit`` receives the raw amount text and the description; ledger
    errors it raises are shown inline, note errors on the description field.
    """
    is_edit = entry is not None

    amount_field = ft.TextField(
        label=f"Amount ({currency}) *",
        value=format_amount(entry.amount) if entry else "",
        autofocus=True,
        width=320,
    )
    description_field = ft.TextField(
        label="Description",
        value=(entry.description or "") if entry else "",
        hint_text="e.g., hmart",
        width=320,
    )

    def _save(_):
        amount_field.error_text = None
        description_field.error_text = None
        raw_amount = (amount_field.value or "").strip()
        if not raw_amount:
            amount_field.error_text = "Amount is required"
            page.update()
            return
        try:
            on_submit(raw_amount, description_field.value)
        except InvalidDescriptionError as exc:
            description_field.error_text = str(exc)
            page.update()
            return
        except LedgerError as exc:
            amount_field.error_text = str(exc)
            page.update()
            return
        _close(page, dialog)

    def _delete(_):
        _close(page, dialog)
        if on_delete is not None:
            on_delete()

    actions: list[ft.Control] = []
    if is_edit and on_delete is not None:
        actions.append(ft.TextButton("Delete", on_click=_delete, style=ft.ButtonStyle(color=ft.Colors.RED)))
    actions.extend(
        [
            ft.TextButton("Cancel", on_click=lambda _: _close(page, dialog)),
            ft.FilledButton("Save" if is_edit else "Add", on_click=_save),
        ]
    )

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(f"Edit entry in {category}" if is_edit else f"New entry in {category}"),
        content=ft.Column([amount_field, description_field], tight=True, spacing=12),
        actions=actions,
    )
    _open(page, dialog)
    return dialog


def show_bill_dialog(
    page: ft.Page,
    *,
    on_submit: Callable[[str, str], None],
    name: str = "",
    raw_text: str = "",
    title: str = "New bill",
) -> ft.AlertDialog:
    """Name + ledger text form used for both creating and editing bills."""

    name_field = ft.TextField(label="Bill name *", value=name, autofocus=True, width=480)
    text_field = ft.TextField(
        label="Ledger text",
        value=raw_text,
        hint_text="Groceries: 10, 16, 54(hmart), 12\nRent: 600",
        multiline=True,
        min_lines=6,
        max_lines=14,
        width=480,
    )

    def _save(_):
        name_field.error_text = None
        text_field.error_text = None
        bill_name = (name_field.value or "").strip()
        if not bill_name:
            name_field.error_text = "Name is required"
            name_field.update()
            return
        try:
            on_submit(bill_name, text_field.value or "")
        except LedgerError as exc:
            text_field.error_text = str(exc)
            text_field.update()
            return
        _close(page, dialog)

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Column([name_field, text_field], tight=True, spacing=12),
        actions=[
            ft.TextButton("Cancel", on_click=lambda _: _close(page, dialog)),
            ft.FilledButton("Save", on_click=_save),
        ],
    )
    _open(page, dialog)
    return dialog


def show_budget_dialog(
    page: ft.Page,
    *,
    category: str,
    current: Optional[Decimal],
    on_submit: Callable[[Optional[str]], None],
    currency: str = "$",
) -> ft.AlertDialog:
    """Set or clear a category budget; an empty value clears it."""

    limit_field = ft.TextField(
        label=f"Limit ({currency})",
        value=format_amount(current) if current is not None else "",
        hint_text="Leave empty to remove the budget",
        autofocus=True,
        width=320,
    )

    def _save(_):
        limit_field.error_text = None
        value = (limit_field.value or "").strip() or None
        try:
            on_submit(value)
        except (LedgerError, ArithmeticError) as exc:
            limit_field.error_text = f"Invalid limit: {exc}"
            limit_field.update()
            return
        _close(page, dialog)

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(f"Budget for {category}"),
        content=limit_field,
        actions=[
            ft.TextButton("Cancel", on_click=lambda _: _close(page, dialog)),
            ft.FilledButton("Save", on_click=_save),
        ],
    )
    _open(page, dialog)
    return dialog


def show_settings_dialog(
    page: ft.Page,
    *,
    currency: str,
    on_submit: Callable[[str], None],
) -> ft.AlertDialog:
    """Pick the currency symbol shown before amounts."""

    options = [ft.dropdown.Option(key=symbol, text=f"{label} ({symbol})") for symbol, label in CURRENCY_OPTIONS]
    if currency not in {symbol for symbol, _label in CURRENCY_OPTIONS}:
        options.append(ft.dropdown.Option(key=currency, text=f"Custom ({currency})"))
    currency_field = ft.Dropdown(label="Currency symbol", value=currency, options=options, width=320)

    def _save(_):
        currency_field.error_text = None
        try:
            on_submit(currency_field.value or "")
        except LedgerError as exc:
            currency_field.error_text = str(exc)
            page.update()
            return
        _close(page, dialog)

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text("Settings"),
        content=currency_field,
        actions=[
            ft.TextButton("Cancel", on_click=lambda _: _close(page, dialog)),
            ft.FilledButton("Save", on_click=_save),
        ],
    )
    _open(page, dialog)
    return dialog


__all__ = [
    "show_bill_dialog",
    "show_budget_dialog",
    "show_confirm_dialog",
    "show_entry_dialog",
    "show_settings_dialog",
    "show_snack",
]
