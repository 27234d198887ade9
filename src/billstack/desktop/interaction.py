"""Pointer-driven state machine for the chart canvas.

The controller consumes plot-space pointer events and the current
``LayoutResult`` and emits advisory intents. It never touches the ledger:
the host applies intents, re-lays out, and hands the new layout back via
:meth:`InteractionController.update_layout`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..domain.intents import CreateEntryIntent, EditEntryIntent, Intent, ReassignIntent
from ..logging_config import get_logger
from ..services.layout import DisplayMode, Lane, LayoutResult, Segment

logger = get_logger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True, slots=True)
class PreviewRect:
    """Floating copy of the dragged segment."""

    x: float
    y: float
    width: float
    height: float
    color: str


@dataclass(frozen=True, slots=True)
class InteractionSnapshot:
    """Everything a renderer needs to draw the current gesture."""

    phase: Phase = Phase.IDLE
    hidden_entry_id: Optional[str] = None
    source_category: Optional[str] = None
    hovered_category: Optional[str] = None
    pointer: Optional[tuple[float, float]] = None
    preview: Optional[PreviewRect] = None

    @property
    def drop_target(self) -> Optional[str]:
        """Hovered lane when it differs from the source lane."""
        if self.hovered_category is None or self.hovered_category == self.source_category:
            return None
        return self.hovered_category


IDLE_SNAPSHOT = InteractionSnapshot()


class InteractionController:
    """Single-drag FSM: ``IDLE -> DRAGGING -> IDLE``."""

    def __init__(self, layout: LayoutResult) -> None:
        self._layout = layout
        self._phase = Phase.IDLE
        self._source: Optional[Segment] = None
        self._origin: Optional[tuple[float, float]] = None
        self._pointer: Optional[tuple[float, float]] = None
        self._hovered: Optional[str] = None
        self._snapshot = IDLE_SNAPSHOT
        self._snapshot_listeners: list[Callable[[InteractionSnapshot], None]] = []
        self._intent_listeners: list[Callable[[Intent], None]] = []
        # Flet runs handlers on a thread pool; one gesture event at a time.
        self._lock = threading.RLock()

    # ---------------------------------------------------------------- queries
    @property
    def layout(self) -> LayoutResult:
        return self._layout

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def snapshot(self) -> InteractionSnapshot:
        return self._snapshot

    def segment_at(self, x: float, y: float) -> Optional[Segment]:
        # Later segments are drawn on top.
        for segment in reversed(self._layout.segments):
            if segment.contains(x, y):
                return segment
        return None

    def lane_at(self, x: float) -> Optional[Lane]:
        for lane in self._layout.lanes:
            if lane.contains_x(x):
                return lane
        return None

    # ----------------------------------------------------------- subscribers
    def subscribe(self, listener: Callable[[InteractionSnapshot], None]) -> Callable[[], None]:
        self._snapshot_listeners.append(listener)
        return lambda: self._discard(self._snapshot_listeners, listener)

    def on_intent(self, listener: Callable[[Intent], None]) -> Callable[[], None]:
        self._intent_listeners.append(listener)
        return lambda: self._discard(self._intent_listeners, listener)

    @staticmethod
    def _discard(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, intent: Intent) -> Intent:
        logger.debug("Interaction intent", extra={"intent": type(intent).__name__})
        for listener in list(self._intent_listeners):
            listener(intent)
        return intent

    def _publish(self) -> None:
        if self._phase is Phase.IDLE:
            snapshot = IDLE_SNAPSHOT
        else:
            assert self._source is not None
            snapshot = InteractionSnapshot(
                phase=self._phase,
                hidden_entry_id=self._source.entry.id,
                source_category=self._source.category,
                hovered_category=self._hovered,
                pointer=self._pointer,
                preview=self._preview(),
            )
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        for listener in list(self._snapshot_listeners):
            listener(snapshot)

    def _preview(self) -> Optional[PreviewRect]:
        if self._source is None or self._pointer is None:
            return None
        px, py = self._pointer
        width, height = self._source.width, self._source.height
        x = px - width / 2
        if self._hovered is not None and self._hovered != self._source.category:
            lane = self._layout.lane_for(self._hovered)
            if lane is not None:
                x, width = lane.x, lane.width
        return PreviewRect(x, py - height / 2, width, height, self._source.color)

    # ---------------------------------------------------------------- events
    def pointer_down(self, x: float, y: float) -> bool:
        """Start a drag when pressing a segment in uniform mode."""
        with self._lock:
            if self._phase is not Phase.IDLE or self._layout.mode is not DisplayMode.UNIFORM:
                return False
            segment = self.segment_at(x, y)
            if segment is None:
                return False
            self._phase = Phase.DRAGGING
            self._source = segment
            self._origin = (x, y)
            self._pointer = (x, y)
            lane = self.lane_at(x)
            self._hovered = lane.category if lane else None
            self._publish()
            return True

    def pointer_move(self, x: float, y: float) -> None:
        with self._lock:
            if self._phase is not Phase.DRAGGING:
                return
            self._pointer = (x, y)
            lane = self.lane_at(x)
            self._hovered = lane.category if lane else None
            self._publish()

    def pointer_up(self, x: float, y: float) -> Optional[ReassignIntent]:
        """Finish the drag; emit a reassignment only for a different lane."""
        with self._lock:
            if self._phase is not Phase.DRAGGING or self._source is None:
                return None
            source = self._source
            lane = self.lane_at(x)
            self._reset()
            if lane is None or lane.category == source.category:
                return None
            intent = ReassignIntent(entry_id=source.entry.id, category=lane.category)
            self._emit(intent)
            return intent

    def cancel(self) -> None:
        with self._lock:
            if self._phase is Phase.DRAGGING:
                self._reset()

    def click(self, x: float, y: float) -> Optional[CreateEntryIntent]:
        """Click in a lane's empty band (uniform mode) requests a new entry."""
        with self._lock:
            if self._phase is not Phase.IDLE or self._layout.mode is not DisplayMode.UNIFORM:
                return None
            lane = self.lane_at(x)
            if lane is None or not lane.in_empty_band(x, y) or self.segment_at(x, y) is not None:
                return None
            return self._emit(CreateEntryIntent(category=lane.category))

    def secondary_click(self, x: float, y: float) -> Optional[EditEntryIntent]:
        with self._lock:
            if self._phase is not Phase.IDLE:
                return None
            segment = self.segment_at(x, y)
            if segment is None:
                return None
            return self._emit(EditEntryIntent(entry=segment.entry))

    def update_layout(self, layout: LayoutResult) -> None:
        """Swap in a new layout, keeping an active drag when its entry survives."""
        with self._lock:
            self._layout = layout
            if self._phase is Phase.DRAGGING and self._source is not None:
                replacement = layout.segment_for(self._source.entry.id)
                if replacement is None or layout.mode is not DisplayMode.UNIFORM:
                    self._reset()
                    return
                self._source = replacement
                if self._pointer is not None:
                    lane = self.lane_at(self._pointer[0])
                    self._hovered = lane.category if lane else None
            self._publish()

    def _reset(self) -> None:
        self._phase = Phase.IDLE
        self._source = None
        self._origin = None
        self._pointer = None
        self._hovered = None
        self._publish()


__all__ = [
    "InteractionController",
    "InteractionSnapshot",
    "Phase",
    "PreviewRect",
]
