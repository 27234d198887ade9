"""SQLModel implementation of the bill store."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import select

from ...domain.errors import BillNotFoundError
from ...logging_config import get_logger
from ...models.bill import Bill
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelBillRepository:
    """SQLModel-based bill repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, bill_id: str) -> Bill:
        """Retrieve a bill by id."""
        with self.session_factory() as session:
            bill = session.get(Bill, bill_id)
            if bill is None:
                raise BillNotFoundError(bill_id)
            session.expunge(bill)
            return bill

    def list_by_owner(self, owner_id: str) -> list[Bill]:
        """List an owner's bills, newest first."""
        with self.session_factory() as session:
            statement = (
                select(Bill)
                .where(Bill.owner_id == owner_id)
                .order_by(Bill.created_at.desc())  # type: ignore[attr-defined]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, bill_id: str, name: str, raw_text: str, owner_id: str) -> Bill:
        """Insert a new bill."""
        with self.session_factory() as session:
            bill = Bill(id=bill_id, name=name, raw_text=raw_text or "", owner_id=owner_id)
            session.add(bill)
            session.commit()
            session.refresh(bill)
            session.expunge(bill)
            logger.info("Bill created", extra={"bill_id": bill_id, "owner_id": owner_id})
            return bill

    def update(self, bill_id: str, name: str, raw_text: str) -> Bill:
        """Replace a bill's name and raw text."""
        with self.session_factory() as session:
            bill = session.get(Bill, bill_id)
            if bill is None:
                raise BillNotFoundError(bill_id)
            bill.name = name
            bill.raw_text = raw_text
            bill.updated_at = datetime.now()
            session.add(bill)
            session.commit()
            session.refresh(bill)
            session.expunge(bill)
            return bill

    def delete(self, bill_id: str) -> None:
        """Delete a bill by id; raises ``BillNotFoundError`` when it is missing."""
        with self.session_factory() as session:
            bill = session.get(Bill, bill_id)
            if bill is None:
                raise BillNotFoundError(bill_id)
            session.delete(bill)
            session.commit()
            logger.info("Bill deleted", extra={"bill_id": bill_id})


__all__ = ["SQLModelBillRepository"]
