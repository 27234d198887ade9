"""Bill list view: create, open, edit, import and delete bills."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING

import flet as ft

from ...devtools import dev_log
from ...domain.errors import BillNotFoundError
from ...logging_config import get_logger
from ...models.bill import Bill
from ...services.import_csv import default_mapping, import_csv_file, normalize_frame
from ...services.ledger_service import ledger_total
from ...services.parser import format_amount, parse_ledger, require_entries, serialize_ledger
from ..components import show_bill_dialog, show_confirm_dialog, show_settings_dialog, show_snack

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)


def new_bill_id() -> str:
    return uuid.uuid4().hex


def build_bills_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the bill list for ``ctx.owner_id``."""

    bills = ctx.bill_repo.list_by_owner(ctx.owner_id)

    def refresh_view():
        page.go("/bills")

    def open_bill(bill_id: str) -> None:
        ctx.current_bill_id = bill_id
        page.go("/chart")

    def create_bill(name: str, raw_text: str) -> None:
        if raw_text.strip():
            require_entries(parse_ledger(raw_text))
        bill_id = new_bill_id()
        ctx.bill_repo.create(bill_id, name, raw_text, ctx.owner_id)
        show_snack(page, f"Bill '{name}' created")
        open_bill(bill_id)

    def edit_bill(bill: Bill) -> None:
        def _submit(name: str, raw_text: str) -> None:
            require_entries(parse_ledger(raw_text))
            ctx.bill_repo.update(bill.id, name, raw_text)
            if ctx.editor is not None and ctx.editor.bill_id == bill.id:
                ctx.editor = None
            show_snack(page, f"Bill '{name}' updated")
            refresh_view()

        show_bill_dialog(page, on_submit=_submit, name=bill.name, raw_text=bill.raw_text, title="Edit bill")

    def delete_bill(bill: Bill) -> None:
        def _confirm() -> None:
            try:
                ctx.bill_repo.delete(bill.id)
            except BillNotFoundError:
                logger.warning("Bill already deleted", extra={"bill_id": bill.id})
            if ctx.current_bill_id == bill.id:
                ctx.current_bill_id = None
                ctx.editor = None
            show_snack(page, f"Bill '{bill.name}' deleted")
            refresh_view()

        show_confirm_dialog(page, "Delete bill", f"Delete '{bill.name}'? This cannot be undone.", _confirm)

    def import_from_csv(path: Path) -> None:
        try:
            mapping = default_mapping(list(normalize_frame(file_path=path).columns))
            if mapping is None:
                raise ValueError("CSV needs at least a category and an amount column")
            ledger = require_entries(import_csv_file(csv_path=path, mapping=mapping))
        except Exception as exc:
            logger.error("CSV import failed", exc_info=True, extra={"path": str(path)})
            dev_log(ctx.config, "CSV import failed", exc=exc, context={"path": path})
            show_snack(page, f"Import failed: {exc}")
            return
        bill_id = new_bill_id()
        ctx.bill_repo.create(bill_id, path.stem, serialize_ledger(ledger), ctx.owner_id)
        show_snack(page, f"Imported {ledger.entry_count} entries from {path.name}")
        open_bill(bill_id)

    def open_settings() -> None:
        def _submit(symbol: str) -> None:
            ctx.set_currency(symbol)
            show_snack(page, f"Currency set to {ctx.currency}")
            refresh_view()

        show_settings_dialog(page, currency=ctx.currency, on_submit=_submit)

    def on_file_picked(e: ft.FilePickerResultEvent) -> None:
        if not e.files:
            return
        import_from_csv(Path(e.files[0].path))

    file_picker = ctx.extras.get("csv_picker")
    if file_picker is None:
        file_picker = ft.FilePicker()
        page.overlay.append(file_picker)
        ctx.extras["csv_picker"] = file_picker
    file_picker.on_result = on_file_picked

    def _bill_tile(bill: Bill) -> ft.Control:
        ledger = parse_ledger(bill.raw_text)
        subtitle = (
            f"{len(ledger)} categories, {ledger.entry_count} entries, "
            f"total {ctx.currency}{format_amount(ledger_total(ledger))}"
        )
        return ft.ListTile(
            leading=ft.Icon(ft.Icons.RECEIPT_LONG),
            title=ft.Text(bill.name, weight=ft.FontWeight.BOLD),
            subtitle=ft.Text(subtitle),
            selected=bill.id == ctx.current_bill_id,
            on_click=lambda _, bill_id=bill.id: open_bill(bill_id),
            trailing=ft.Row(
                [
                    ft.IconButton(icon=ft.Icons.EDIT, tooltip="Edit", on_click=lambda _, b=bill: edit_bill(b)),
                    ft.IconButton(icon=ft.Icons.DELETE, tooltip="Delete", on_click=lambda _, b=bill: delete_bill(b)),
                ],
                tight=True,
            ),
        )

    if bills:
        content: ft.Control = ft.ListView(controls=[_bill_tile(b) for b in bills], expand=True, spacing=4)
    else:
        content = ft.Container(
            content=ft.Text("No bills yet. Create one or import a CSV file.", color=ft.Colors.ON_SURFACE_VARIANT),
            padding=24,
        )

    toolbar = ft.Row(
        [
            ft.Text("Bills", size=24, weight=ft.FontWeight.BOLD),
            ft.Container(expand=True),
            ft.FilledButton(
                "New bill",
                icon=ft.Icons.ADD,
                on_click=lambda _: show_bill_dialog(page, on_submit=create_bill),
            ),
            ft.OutlinedButton(
                "Import CSV",
                icon=ft.Icons.UPLOAD_FILE,
                on_click=lambda _: file_picker.pick_files(allowed_extensions=["csv"], allow_multiple=False),
            ),
            ft.IconButton(icon=ft.Icons.SETTINGS, tooltip="Settings", on_click=lambda _: open_settings()),
        ]
    )

    return ft.View(route="/bills", padding=16, controls=[toolbar, ft.Divider(height=1), content])


__all__ = ["build_bills_view", "new_bill_id"]
