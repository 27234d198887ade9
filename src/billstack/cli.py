"""Command line interface for BillStack."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .domain.errors import LedgerError
from .logging_config import setup_logging


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


def _store(config: BaseConfig):
    from .infra.database import bootstrap_database
    from .infra.repositories import SQLModelBillRepository, SQLModelBudgetRepository

    _engine, session_factory = bootstrap_database(config)
    return SQLModelBillRepository(session_factory), SQLModelBudgetRepository(session_factory)


def _settings(config: BaseConfig):
    from .infra.database import bootstrap_database
    from .infra.repositories import SQLModelSettingsRepository

    _engine, session_factory = bootstrap_database(config)
    return SQLModelSettingsRepository(session_factory)


def _currency(config: BaseConfig) -> str:
    from .services.preferences import load_currency

    return load_currency(_settings(config), config.CURRENCY_SYMBOL)


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Enable structured logging to the data dir.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Parse, render and manage text-defined bills."""

    config = BaseConfig()
    ctx.obj = config
    if verbose:
        setup_logging(config)


@cli.command("parse")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--quiet", is_flag=True, default=False, help="Do not report skipped items.")
def parse_command(file: Path, quiet: bool) -> None:
    """Print FILE in normalised ledger form and report skipped items."""

    from .services.parser import parse_ledger_with_diagnostics, require_entries, serialize_ledger

    result = parse_ledger_with_diagnostics(_read_text(file))
    if not quiet:
        for skipped in result.skipped:
            click.echo(f"line {skipped.line_number}: skipped {skipped.text!r} ({skipped.reason})", err=True)
    try:
        require_entries(result.ledger)
    except LedgerError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(serialize_ledger(result.ledger))


@cli.command("render")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--mode",
    type=click.Choice(["uniform", "proportional", "edit", "preview"], case_sensitive=False),
    default="proportional",
    show_default=True,
)
@click.option("--out", "out_path", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.option("--width", type=float, default=1000, show_default=True)
@click.option("--screen-height", type=float, default=1000, show_default=True)
@click.option("--budgets/--no-budgets", default=False, help="Overlay stored budget limits.")
@click.pass_obj
def render_command(
    config: BaseConfig,
    file: Path,
    mode: str,
    out_path: Path,
    width: float,
    screen_height: float,
    budgets: bool,
) -> None:
    """Render FILE as a stacked segment chart PNG."""

    from .desktop.charts import segment_chart_png
    from .services.budgeting import budget_marks, compute_utilization
    from .services.layout import auto_viewport, layout_ledger
    from .services.parser import parse_ledger

    ledger = parse_ledger(_read_text(file))
    viewport = auto_viewport(ledger, mode, width, screen_height)
    layout = layout_ledger(ledger, ledger.categories(), mode, viewport)
    marks = None
    if budgets:
        _bills, budget_repo = _store(config)
        usages = compute_utilization(ledger=ledger, budgets=budget_repo.list_all())
        marks = budget_marks(layout, usages)
    path = segment_chart_png(layout, budget_marks=marks, currency=_currency(config), out_path=out_path)
    click.echo(f"Chart written: {path}")


@cli.command("import-csv")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--category-col", default=None, help="Category column (default: first column).")
@click.option("--amount-col", default=None, help="Amount column (default: second column).")
@click.option("--description-col", default=None, help="Optional description column.")
@click.option("--save", "save_as", default=None, help="Store the result as a bill with this name.")
@click.pass_obj
def import_csv_command(
    config: BaseConfig,
    file: Path,
    category_col: Optional[str],
    amount_col: Optional[str],
    description_col: Optional[str],
    save_as: Optional[str],
) -> None:
    """Convert a CSV export into ledger text."""

    from .services.import_csv import ColumnMapping, default_mapping, import_csv_file, normalize_frame
    from .services.parser import require_entries, serialize_ledger

    if category_col and amount_col:
        mapping = ColumnMapping(category=category_col, amount=amount_col, description=description_col)
    else:
        mapping = default_mapping(list(normalize_frame(file_path=file).columns))
        if mapping is None:
            raise click.ClickException("CSV needs at least a category and an amount column")
        if category_col:
            mapping.category = category_col
        if amount_col:
            mapping.amount = amount_col
        if description_col:
            mapping.description = description_col

    try:
        ledger = require_entries(import_csv_file(csv_path=file, mapping=mapping))
    except (LedgerError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    text = serialize_ledger(ledger)
    if save_as:
        import uuid

        bill_repo, _budgets = _store(config)
        bill = bill_repo.create(uuid.uuid4().hex, save_as, text, config.OWNER_ID)
        click.echo(f"Saved bill {bill.name!r} ({bill.id})")
    click.echo(text)


@cli.command("bills")
@click.pass_obj
def bills_command(config: BaseConfig) -> None:
    """List the configured owner's bills, newest first."""

    from .services.ledger_service import ledger_total
    from .services.parser import format_amount, parse_ledger

    bill_repo, _budgets = _store(config)
    bills = bill_repo.list_by_owner(config.OWNER_ID)
    if not bills:
        click.echo("No bills found.")
        return
    currency = _currency(config)
    for bill in bills:
        ledger = parse_ledger(bill.raw_text)
        total = format_amount(ledger_total(ledger))
        click.echo(f"{bill.id}  {bill.name}  {ledger.entry_count} entries  {currency}{total}")


@cli.command("budget")
@click.argument("category")
@click.argument("limit", required=False)
@click.option("--clear", is_flag=True, default=False, help="Remove the category budget.")
@click.pass_obj
def budget_command(config: BaseConfig, category: str, limit: Optional[str], clear: bool) -> None:
    """Show, set or clear the budget limit for CATEGORY."""

    _bills, budget_repo = _store(config)
    if clear:
        budget_repo.delete(category)
        click.echo(f"Budget cleared for {category}")
        return
    if limit is None:
        current = budget_repo.get(category)
        click.echo(f"{category}: {'no budget' if current is None else current}")
        return
    try:
        budget_repo.set(category, Decimal(limit))
    except (InvalidOperation, LedgerError) as exc:
        raise click.ClickException(f"invalid limit: {limit}") from exc
    click.echo(f"Budget for {category} set to {limit}")


@cli.command("currency")
@click.argument("symbol", required=False)
@click.pass_obj
def currency_command(config: BaseConfig, symbol: Optional[str]) -> None:
    """Show or set the currency symbol used for totals and charts."""

    from .services.preferences import CURRENCY_OPTIONS, save_currency

    if symbol is None:
        click.echo(f"Currency symbol: {_currency(config)}")
        click.echo("Common choices: " + " ".join(s for s, _label in CURRENCY_OPTIONS))
        return
    try:
        stored = save_currency(_settings(config), symbol)
    except LedgerError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Currency symbol set to {stored}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
