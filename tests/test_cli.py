"""Command line interface."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from billstack.cli import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("BILLSTACK_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("BILLSTACK_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("BILLSTACK_OWNER_ID", "tester")
    return CliRunner()


@pytest.fixture
def bill_file(tmp_path):
    path = tmp_path / "march.txt"
    path.write_text("超市：10, 16, 54(hmart)\nnoise\n房租: 600, abc\n", encoding="utf-8")
    return path


def test_parse_prints_normalized_text(runner, bill_file):
    result = runner.invoke(cli, ["parse", str(bill_file)])

    assert result.exit_code == 0, result.output
    assert "超市: 10, 16, 54(hmart)\n房租: 600" in result.output
    assert "line 2: skipped 'noise' (malformed-line)" in result.output
    assert "'abc'" in result.output


def test_parse_quiet(runner, bill_file):
    result = runner.invoke(cli, ["parse", "--quiet", str(bill_file)])

    assert result.exit_code == 0
    assert "skipped" not in result.output


def test_parse_empty_file_fails(runner, tmp_path):
    empty = tmp_path / "empty.txt"
    empty.write_text("nothing useful\n", encoding="utf-8")

    result = runner.invoke(cli, ["parse", str(empty)])

    assert result.exit_code == 1
    assert "no valid data found" in result.output


@pytest.mark.parametrize("mode", ["uniform", "preview"])
def test_render_writes_png(runner, bill_file, tmp_path, mode):
    out = tmp_path / f"{mode}.png"

    result = runner.invoke(cli, ["render", str(bill_file), "--mode", mode, "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "Chart written" in result.output


def test_render_with_budgets(runner, bill_file, tmp_path):
    assert runner.invoke(cli, ["budget", "房租", "500"]).exit_code == 0
    out = tmp_path / "budgets.png"

    result = runner.invoke(cli, ["render", str(bill_file), "--out", str(out), "--budgets"])

    assert result.exit_code == 0, result.output
    assert out.exists()


def test_budget_commands(runner):
    assert "Food: no budget" in runner.invoke(cli, ["budget", "Food"]).output

    set_result = runner.invoke(cli, ["budget", "Food", "120"])
    assert set_result.exit_code == 0
    assert "Food: 120" in runner.invoke(cli, ["budget", "Food"]).output

    assert runner.invoke(cli, ["budget", "Food", "--", "-3"]).exit_code == 1
    assert runner.invoke(cli, ["budget", "Food", "lots"]).exit_code == 1

    runner.invoke(cli, ["budget", "Food", "--clear"])
    assert "Food: no budget" in runner.invoke(cli, ["budget", "Food"]).output


def test_import_csv_and_list_bills(runner, tmp_path):
    csv_path = tmp_path / "bank.csv"
    csv_path.write_text("Category,Amount,Memo\nFood,$4.50,coffee\nFood,10,\nRent,600,\n", encoding="utf-8")

    result = runner.invoke(cli, ["import-csv", str(csv_path), "--save", "Bank export"])

    assert result.exit_code == 0, result.output
    assert "Food: 4.5(coffee), 10\nRent: 600" in result.output
    assert "Saved bill 'Bank export'" in result.output

    listing = runner.invoke(cli, ["bills"])
    assert "Bank export" in listing.output
    assert "3 entries" in listing.output
    assert "$614.5" in listing.output


def test_import_csv_with_explicit_columns(runner, tmp_path):
    csv_path = tmp_path / "other.csv"
    csv_path.write_text("date,what,cost\n2024-01-01,Fuel,40\n", encoding="utf-8")

    result = runner.invoke(cli, ["import-csv", str(csv_path), "--category-col", "what", "--amount-col", "cost"])

    assert result.exit_code == 0, result.output
    assert "Fuel: 40" in result.output


def test_import_csv_missing_column(runner, tmp_path):
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("a,b\nx,1\n", encoding="utf-8")

    result = runner.invoke(cli, ["import-csv", str(csv_path), "--category-col", "kind", "--amount-col", "b"])

    assert result.exit_code == 1
    assert "missing column" in result.output


def test_bills_empty(runner):
    result = runner.invoke(cli, ["bills"])

    assert result.exit_code == 0
    assert "No bills found." in result.output


def test_currency_command_sets_symbol_used_by_bills(runner, tmp_path):
    assert "Currency symbol: $" in runner.invoke(cli, ["currency"]).output

    result = runner.invoke(cli, ["currency", "€"])
    assert result.exit_code == 0, result.output
    assert "Currency symbol set to €" in result.output

    csv_path = tmp_path / "bank.csv"
    csv_path.write_text("Category,Amount\nFood,4\n", encoding="utf-8")
    runner.invoke(cli, ["import-csv", str(csv_path), "--save", "Trip"])
    assert "€4" in runner.invoke(cli, ["bills"]).output


@pytest.mark.parametrize("symbol", ["12", "EUR EUR", "toolong"])
def test_currency_command_rejects_bad_symbols(runner, symbol):
    result = runner.invoke(cli, ["currency", symbol])

    assert result.exit_code == 1
    assert "currency symbol" in result.output
    assert "Currency symbol: $" in runner.invoke(cli, ["currency"]).output
