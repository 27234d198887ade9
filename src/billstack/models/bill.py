"""SQLModel definition for stored bills."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from sqlmodel import Field, SQLModel


class Bill(SQLModel, table=True):
    """A named ledger persisted as its raw text form.

    The structured ledger is never stored; it is re-derived from
    ``raw_text`` by the parser on every load.
    """

    __tablename__: ClassVar[str] = "bill"

    id: str = Field(primary_key=True, max_length=64)
    owner_id: str = Field(index=True, nullable=False, max_length=64)
    name: str = Field(nullable=False, max_length=128)
    raw_text: str = Field(default="", nullable=False)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=datetime.now, nullable=False)
