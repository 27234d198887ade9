"""Stored user preferences: chart mode and currency symbol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..domain.errors import InvalidSettingError
from ..logging_config import get_logger
from .layout import DisplayMode

logger = get_logger(__name__)

DISPLAY_MODE_KEY = "display_mode"
CURRENCY_KEY = "currency_symbol"

CURRENCY_OPTIONS: tuple[tuple[str, str], ...] = (
    ("$", "US dollar"),
    ("¥", "Chinese yuan"),
    ("€", "Euro"),
    ("£", "Pound sterling"),
    ("₹", "Indian rupee"),
    ("₽", "Russian ruble"),
    ("₩", "South Korean won"),
    ("₪", "Israeli new shekel"),
)
MAX_CURRENCY_LENGTH = 4


class SettingsStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, description: str | None = None) -> None:
        ...


def normalize_currency(symbol: Optional[str]) -> str:
    """Strip ``symbol`` and check it is a short prefix with no digits or spaces."""

    symbol = (symbol or "").strip()
    if not symbol:
        raise InvalidSettingError("currency symbol must not be empty")
    if len(symbol) > MAX_CURRENCY_LENGTH:
        raise InvalidSettingError(f"currency symbol must be at most {MAX_CURRENCY_LENGTH} characters")
    if any(ch.isdigit() or ch.isspace() for ch in symbol):
        raise InvalidSettingError("currency symbol cannot contain digits or spaces")
    return symbol


def load_currency(store: SettingsStore, default: str = "$") -> str:
    stored = store.get(CURRENCY_KEY)
    if not stored:
        return default
    try:
        return normalize_currency(stored)
    except InvalidSettingError:
        logger.warning("Ignoring stored currency symbol", extra={"value": stored})
        return default


def save_currency(store: SettingsStore, symbol: str) -> str:
    """Validate and persist the currency symbol; returns the stored value."""

    symbol = normalize_currency(symbol)
    store.set(CURRENCY_KEY, symbol, description="Prefix shown before amounts")
    logger.info("Currency symbol changed", extra={"currency": symbol})
    return symbol


def load_display_mode(store: SettingsStore) -> DisplayMode:
    stored = store.get(DISPLAY_MODE_KEY)
    if not stored:
        return DisplayMode.PROPORTIONAL
    try:
        return DisplayMode.parse(stored)
    except ValueError:
        return DisplayMode.PROPORTIONAL


def save_display_mode(store: SettingsStore, mode: DisplayMode | str) -> DisplayMode:
    display_mode = DisplayMode.parse(mode)
    store.set(DISPLAY_MODE_KEY, display_mode.value)
    return display_mode


__all__ = [
    "CURRENCY_KEY",
    "CURRENCY_OPTIONS",
    "DISPLAY_MODE_KEY",
    "MAX_CURRENCY_LENGTH",
    "load_currency",
    "load_display_mode",
    "normalize_currency",
    "save_currency",
    "save_display_mode",
]
