"""Service module exports."""

from . import (
    budgeting,
    color_scale,
    editor,
    history,
    import_csv,
    layout,
    ledger_service,
    parser,
)

__all__ = [
    "budgeting",
    "color_scale",
    "editor",
    "history",
    "import_csv",
    "layout",
    "ledger_service",
    "parser",
]
