"""Reusable UI components for the desktop app."""

from .dialogs import (
    show_bill_dialog,
    show_budget_dialog,
    show_confirm_dialog,
    show_entry_dialog,
    show_settings_dialog,
    show_snack,
)
from .segment_canvas import build_segment_shapes

__all__ = [
    "build_segment_shapes",
    "show_bill_dialog",
    "show_budget_dialog",
    "show_confirm_dialog",
    "show_entry_dialog",
    "show_settings_dialog",
    "show_snack",
]
