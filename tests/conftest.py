"""Pytest configuration and shared fixtures for BillStack tests.

Provides a temporary SQLite database, a session factory matching the
repository contract, a Flet page stub for view tests and a few ledger
helpers.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path

import flet as ft
import pytest
from sqlmodel import Session, SQLModel, create_engine

import billstack.models  # noqa: F401  (register tables)
from billstack.domain.ledger import Entry, GroupedLedger
from billstack.infra.repositories import (
    SQLModelBillRepository,
    SQLModelBudgetRepository,
    SQLModelSettingsRepository,
)
from billstack.services.layout import Viewport

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Factory of transactional session scopes, as the repositories expect."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def bill_repo(session_factory) -> SQLModelBillRepository:
    return SQLModelBillRepository(session_factory)


@pytest.fixture
def budget_repo(session_factory) -> SQLModelBudgetRepository:
    return SQLModelBudgetRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


# =============================================================================
# Ledger helpers
# =============================================================================


def make_ledger(categories: dict[str, list]) -> GroupedLedger:
    """Build a ledger from ``{"cat": [10, (54, "note")]}`` with stable ids."""

    ledger = GroupedLedger()
    counter = 0
    for category, items in categories.items():
        for item in items:
            amount, description = item if isinstance(item, tuple) else (item, None)
            counter += 1
            ledger.add(
                Entry(
                    id=f"e{counter}",
                    category=category,
                    amount=Decimal(str(amount)),
                    description=description,
                )
            )
    return ledger


@pytest.fixture
def ledger_factory():
    return make_ledger


@pytest.fixture
def viewport() -> Viewport:
    """1000x600 chart with the default margins (plot area 880x440)."""
    return Viewport(width=1000, height=600)


# =============================================================================
# Flet stubs
# =============================================================================


class PageStub:
    """Minimal stand-in for ``ft.Page`` used by view builders."""

    def __init__(self):
        self.overlay: list[ft.Control] = []
        self.views: list[ft.View] = []
        self.snack_bar = None
        self.dialog = None
        self.route = "/"
        self.width = 1280
        self.height = 800
        self.padding = 0
        self.on_resized = None
        self.updates = 0

    def go(self, route: str):
        self.route = route

    def update(self):
        self.updates += 1


@pytest.fixture
def page_stub() -> PageStub:
    return PageStub()


@pytest.fixture
def app_ctx(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Real ``AppContext`` on a temp database with inline persistence."""

    from billstack.desktop.context import create_app_context

    monkeypatch.setenv("BILLSTACK_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("BILLSTACK_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("BILLSTACK_DEV_MODE", "false")
    ctx = create_app_context()
    if ctx.dispatcher is not None:
        ctx.dispatcher.shutdown(wait=True)
    ctx.dispatcher = None
    return ctx
