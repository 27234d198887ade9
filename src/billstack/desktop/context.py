"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import flet as ft

from ..config import BaseConfig
from ..domain.repositories import BillRepository, BudgetRepository
from ..infra.database import SessionFactory, bootstrap_database
from ..infra.repositories import (
    SQLModelBillRepository,
    SQLModelBudgetRepository,
    SQLModelSettingsRepository,
)
from ..services.editor import BillEditor, SerialDispatcher
from ..services.layout import DisplayMode
from ..services.preferences import load_currency, load_display_mode, save_currency, save_display_mode


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    session_factory: SessionFactory

    bill_repo: BillRepository
    budget_repo: BudgetRepository
    settings_repo: SQLModelSettingsRepository

    owner_id: str
    display_mode: DisplayMode = DisplayMode.PROPORTIONAL
    currency: str = "$"

    current_bill_id: Optional[str] = None
    editor: Optional[BillEditor] = None
    dispatcher: Optional[SerialDispatcher] = None

    page: Optional[ft.Page] = None
    dev_mode: bool = False
    extras: dict = field(default_factory=dict)

    def set_display_mode(self, mode: DisplayMode | str) -> DisplayMode:
        """Switch chart mode and remember it across launches."""
        self.display_mode = save_display_mode(self.settings_repo, mode)
        return self.display_mode

    def set_currency(self, symbol: str) -> str:
        """Validate, store and apply a new currency symbol."""
        self.currency = save_currency(self.settings_repo, symbol)
        return self.currency


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)
    settings_repo = SQLModelSettingsRepository(session_factory)

    return AppContext(
        config=config,
        dev_mode=config.DEV_MODE,
        session_factory=session_factory,
        bill_repo=SQLModelBillRepository(session_factory),
        budget_repo=SQLModelBudgetRepository(session_factory),
        settings_repo=settings_repo,
        owner_id=config.OWNER_ID,
        display_mode=load_display_mode(settings_repo),
        currency=load_currency(settings_repo, config.CURRENCY_SYMBOL),
        dispatcher=SerialDispatcher(),
    )


__all__ = ["AppContext", "create_app_context"]
