"""CSV ingestion into a grouped ledger."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

import pandas as pd

from ..domain.ledger import Entry, GroupedLedger, generate_entry_id
from ..logging_config import get_logger
from .parser import note_brackets, parse_amount

logger = get_logger(__name__)

_CURRENCY_NOISE = re.compile(r"[$,\s]")
_CATEGORY_NOISE = re.compile(r"[:：]")
_NOTE_SWAPS = str.maketrans({",": ";", "，": "；", "\r": " ", "\n": " "})


@dataclass(slots=True)
class ColumnMapping:
    """Maps ledger fields to CSV headers (matched case-insensitively)."""

    category: str
    amount: str
    description: str | None = None

    def normalized(self) -> "ColumnMapping":
        return ColumnMapping(
            category=self.category.strip().lower(),
            amount=self.amount.strip().lower(),
            description=self.description.strip().lower() if self.description else None,
        )


def default_mapping(columns: Sequence[str]) -> Optional[ColumnMapping]:
    """First column is the category, second the amount, third (if any) the note."""

    if len(columns) < 2:
        return None
    return ColumnMapping(
        category=columns[0],
        amount=columns[1],
        description=columns[2] if len(columns) > 2 else None,
    )


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file as strings with stripped, lower-cased headers."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame


def _clean_amount(raw) -> Optional[Decimal]:
    if raw is None:
        return None
    return parse_amount(_CURRENCY_NOISE.sub("", str(raw)))


def _text_safe_category(raw) -> str:
    return _CATEGORY_NOISE.sub("-", " ".join(str(raw or "").split()))


def _text_safe_note(raw) -> Optional[str]:
    """Rewrite a memo so it survives the ledger text form."""

    note = str(raw or "").translate(_NOTE_SWAPS).strip()
    if note and note_brackets(note) is None:
        note = note.replace("(", "[").replace(")", "]")
    return note or None


def rows_to_ledger(*, rows: Iterable[Mapping], mapping: ColumnMapping) -> GroupedLedger:
    """Group rows by category; rows without a category or a positive amount are skipped."""

    mapping = mapping.normalized()
    ledger = GroupedLedger()
    skipped = 0
    for row in rows:
        category = _text_safe_category(row.get(mapping.category))
        amount = _clean_amount(row.get(mapping.amount))
        if not category or amount is None:
            skipped += 1
            continue
        description = None
        if mapping.description:
            description = _text_safe_note(row.get(mapping.description))
        ledger.add(
            Entry(id=generate_entry_id(), category=category, amount=amount, description=description)
        )
    if skipped:
        logger.info("CSV import skipped rows", extra={"skipped": skipped})
    return ledger


def import_csv_file(*, csv_path: Path, mapping: ColumnMapping) -> GroupedLedger:
    """Parse ``csv_path`` with ``mapping`` and return the grouped ledger."""

    frame = normalize_frame(file_path=csv_path)
    wanted = mapping.normalized()
    missing = [c for c in (wanted.category, wanted.amount) if c not in frame.columns]
    if missing:
        raise ValueError(f"CSV is missing column(s): {', '.join(missing)}")
    rows = frame.to_dict(orient="records")
    return rows_to_ledger(rows=rows, mapping=mapping)


__all__ = [
    "ColumnMapping",
    "default_mapping",
    "import_csv_file",
    "normalize_frame",
    "rows_to_ledger",
]
