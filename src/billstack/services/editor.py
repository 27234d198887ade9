"""Applies entry-level edits to one bill and keeps its store copy in sync.

Every mutation runs the same pipeline: edit the flat ledger, regroup,
serialize, extend the session categories, push a history snapshot, persist.
Persistence goes through ``dispatch`` so the desktop app can move it off
the UI thread; a rejected write keeps the local change and marks the
editor ``unsynced`` until :meth:`BillEditor.retry_persist` succeeds.
Content listeners only fire from the thread that made the edit; sync
status has its own listeners.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from ..domain.errors import PersistenceFailure
from ..domain.intents import Intent, ReassignIntent
from ..domain.ledger import Entry, FlatLedger, GroupedLedger, SessionCategorySet
from ..domain.repositories.bill import BillRepository
from ..logging_config import get_logger
from . import ledger_service
from .history import SnapshotHistory
from .parser import parse_ledger, require_entries, serialize_ledger

logger = get_logger(__name__)

Job = Callable[[], None]
Dispatch = Callable[[Job], None]


@dataclass(frozen=True, slots=True)
class BillSnapshot:
    """History unit: the persisted form of a bill."""

    name: str
    raw_text: str


def run_inline(job: Job) -> None:
    job()


class SerialDispatcher:
    """Run persistence jobs on one background worker, in submission order."""

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="billstack-persist")

    def __call__(self, job: Job) -> None:
        self._executor.submit(job)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class BillEditor:
    """In-memory editing session for a single bill."""

    def __init__(
        self,
        store: BillRepository,
        bill_id: str,
        name: str,
        raw_text: str,
        *,
        history: Optional[SnapshotHistory[BillSnapshot]] = None,
        dispatch: Optional[Dispatch] = None,
        on_persist_error: Optional[Callable[[PersistenceFailure], None]] = None,
        history_size: int = 50,
    ) -> None:
        self.store = store
        self.bill_id = bill_id
        self.name = name
        self.raw_text = raw_text or ""
        self.ledger: GroupedLedger = ledger_service.ensure_ids(parse_ledger(self.raw_text))
        self.categories = SessionCategorySet.from_ledger(self.ledger)
        self.history = history or SnapshotHistory(
            BillSnapshot(self.name, self.raw_text), max_size=history_size
        )
        self.dispatch: Dispatch = dispatch or run_inline
        self.on_persist_error = on_persist_error
        self.unsynced = False
        self.last_error: Optional[PersistenceFailure] = None
        self._listeners: list[Callable[["BillEditor"], None]] = []
        self._sync_listeners: list[Callable[["BillEditor"], None]] = []

    # ------------------------------------------------------------------ state
    @property
    def flat(self) -> FlatLedger:
        return ledger_service.to_flat(self.ledger)

    @property
    def category_order(self) -> list[str]:
        return self.categories.as_list()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def subscribe(self, listener: Callable[["BillEditor"], None]) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_sync(self, listener: Callable[["BillEditor"], None]) -> Callable[[], None]:
        """Register a listener for ``unsynced`` flips.

        It is called from whichever thread ran the write, so it must not
        touch layout or gesture state.
        """
        self._sync_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._sync_listeners:
                self._sync_listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -------------------------------------------------------------- mutations
    def move_entry(self, entry_id: str, category: str) -> bool:
        """Reassign an entry; returns False when it is already in ``category``."""
        current = ledger_service.find_entry(self.flat, entry_id)
        if current.category == category.strip():
            return False
        self._commit(ledger_service.move_entry(self.flat, entry_id, category))
        logger.info("Entry moved", extra={"bill_id": self.bill_id, "category": category})
        return True

    def update_entry(self, entry_id: str, *, amount: Decimal | str, description: Optional[str]) -> None:
        self._commit(
            ledger_service.update_entry(self.flat, entry_id, amount=amount, description=description)
        )

    def delete_entry(self, entry_id: str) -> None:
        self._commit(ledger_service.delete_entry(self.flat, entry_id))
        logger.info("Entry deleted", extra={"bill_id": self.bill_id})

    def add_entry(self, category: str, amount: Decimal | str, description: Optional[str] = None) -> Entry:
        flat = ledger_service.append_entry(self.flat, category, amount, description)
        self._commit(flat)
        return flat[-1]

    def replace_text(self, raw_text: str) -> GroupedLedger:
        """Bulk re-parse; raises ``EmptyLedgerError`` when nothing parses."""
        ledger = require_entries(parse_ledger(raw_text))
        self.ledger = ledger_service.ensure_ids(ledger)
        self.raw_text = raw_text
        self._after_change()
        return self.ledger

    def rename(self, name: str) -> None:
        name = (name or "").strip()
        if not name:
            raise ValueError("bill name must not be empty")
        if name == self.name:
            return
        self.name = name
        self._after_change()

    def apply(self, intent: Intent) -> bool:
        """Apply an intent that needs no further input (drag reassignment)."""
        if isinstance(intent, ReassignIntent):
            return self.move_entry(intent.entry_id, intent.category)
        raise TypeError(f"{type(intent).__name__} requires user input before it can be applied")

    # ---------------------------------------------------------------- history
    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def _restore(self, snapshot: BillSnapshot) -> None:
        self.name = snapshot.name
        self.raw_text = snapshot.raw_text
        self.ledger = ledger_service.ensure_ids(parse_ledger(snapshot.raw_text))
        self.categories.extend(self.ledger.categories())
        self._notify()
        self._persist()

    # ------------------------------------------------------------ persistence
    def _commit(self, flat: FlatLedger) -> None:
        self.ledger = ledger_service.to_grouped(flat)
        self.raw_text = serialize_ledger(self.ledger)
        self._after_change()

    def _after_change(self) -> None:
        self.categories.extend(self.ledger.categories())
        self.history.push(BillSnapshot(self.name, self.raw_text))
        self._notify()
        self._persist()

    def _set_unsynced(self, value: bool) -> None:
        changed = value != self.unsynced
        self.unsynced = value
        if changed:
            for listener in list(self._sync_listeners):
                listener(self)

    def retry_persist(self) -> None:
        """Resubmit the current state after a failed write."""
        self._persist()

    def _persist(self) -> None:
        bill_id, name, raw_text = self.bill_id, self.name, self.raw_text

        def job() -> None:
            try:
                self.store.update(bill_id, name, raw_text)
            except Exception as exc:
                failure = PersistenceFailure(bill_id, f"Failed to save bill: {exc}")
                failure.__cause__ = exc
                self.last_error = failure
                self._set_unsynced(True)
                logger.error("Bill save failed", exc_info=True, extra={"bill_id": bill_id})
                if self.on_persist_error is None:
                    raise failure from exc
                self.on_persist_error(failure)
                return
            self.last_error = None
            self._set_unsynced(False)

        self.dispatch(job)


__all__ = ["BillEditor", "BillSnapshot", "SerialDispatcher", "run_inline"]
