"""Stored currency and display-mode preferences."""

from __future__ import annotations

import pytest

from billstack.domain.errors import InvalidSettingError
from billstack.services.layout import DisplayMode
from billstack.services.preferences import (
    CURRENCY_KEY,
    DISPLAY_MODE_KEY,
    load_currency,
    load_display_mode,
    normalize_currency,
    save_currency,
    save_display_mode,
)


def test_currency_defaults_until_saved(settings_repo):
    assert load_currency(settings_repo, "¥") == "¥"

    assert save_currency(settings_repo, " € ") == "€"

    assert settings_repo.get(CURRENCY_KEY) == "€"
    assert load_currency(settings_repo, "¥") == "€"


@pytest.mark.parametrize("symbol", ["", "   ", "12", "R $", "toolong"])
def test_bad_currency_symbols_are_rejected(settings_repo, symbol):
    with pytest.raises(InvalidSettingError):
        save_currency(settings_repo, symbol)

    assert settings_repo.get(CURRENCY_KEY) is None


def test_corrupt_stored_currency_falls_back(settings_repo):
    settings_repo.set(CURRENCY_KEY, "123456")

    assert load_currency(settings_repo, "$") == "$"


def test_short_prefixes_are_allowed():
    assert normalize_currency("CHF") == "CHF"
    assert normalize_currency("R$") == "R$"


def test_display_mode_round_trip(settings_repo):
    assert load_display_mode(settings_repo) is DisplayMode.PROPORTIONAL

    save_display_mode(settings_repo, "edit")

    assert settings_repo.get(DISPLAY_MODE_KEY) == "uniform"
    assert load_display_mode(settings_repo) is DisplayMode.UNIFORM


def test_unknown_stored_mode_falls_back(settings_repo):
    settings_repo.set(DISPLAY_MODE_KEY, "sideways")

    assert load_display_mode(settings_repo) is DisplayMode.PROPORTIONAL
