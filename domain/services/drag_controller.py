from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from domain.models import Point, PointerButton, PointerEvent, PositionedItem
from domain.services.canvas_bounds import CanvasBoundsManager
from domain.services.edge_auto_scroll import EdgeAutoScroller
from domain.services.pointer_capture import CaptureHandle, PointerCapture
from domain.services.position_store import PositionStore
from domain.services.viewport import Viewport
from domain.services.z_order import ZOrderAllocator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DragConfig:
    click_threshold: float = 4.0
    allow_negative_positions: bool = False


@dataclass
class DragSession:
    item_id: str
    pointer_id: int
    pointer_to_item_offset: Point
    start_client: Point
    last_candidate: Point
    max_displacement: float = 0.0


@dataclass(frozen=True)
class DragCommit:
    item_id: str
    position: PositionedItem
    moved: bool


class DragController:
    """Single active item drag.

    The live position of the dragged item is written to the store's transient
    cache on every move and only reconciled into the override map on release.
    """

    def __init__(
        self,
        *,
        store: PositionStore,
        viewport: Viewport,
        bounds: CanvasBoundsManager,
        auto_scroller: EdgeAutoScroller,
        capture: PointerCapture,
        z_order: ZOrderAllocator,
        on_commit: Callable[[DragCommit], None] | None = None,
        config: DragConfig | None = None,
    ) -> None:
        self.store = store
        self.viewport = viewport
        self.bounds = bounds
        self.auto_scroller = auto_scroller
        self.capture = capture
        self.z_order = z_order
        self._on_commit = on_commit
        self.config = config or DragConfig()
        self._session: DragSession | None = None
        self._handle: CaptureHandle | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    def begin(self, event: PointerEvent, item_id: str) -> bool:
        if self.capture.active:
            logger.debug("Ignoring drag start on %s: a gesture is already open", item_id)
            return False
        if event.button != PointerButton.PRIMARY or item_id not in self.store:
            return False
        item = self.store.effective(item_id)
        pointer = self.viewport.to_canvas(event.client)
        self._session = DragSession(
            item_id=item_id,
            pointer_id=event.pointer_id,
            pointer_to_item_offset=pointer - item.position,
            start_client=event.client,
            last_candidate=item.position,
        )
        self._handle = self.capture.acquire(
            event.pointer_id,
            on_move=self._move,
            on_up=self._release,
            on_cancel=self._cancel,
        )
        logger.debug("Drag started on %s", item_id)
        return True

    def abort(self) -> None:
        session = self._session
        if session is not None:
            self.store.clear_live(session.item_id)
        self._end()

    def _candidate(self, event: PointerEvent, session: DragSession) -> Point:
        candidate = self.viewport.to_canvas(event.client) - session.pointer_to_item_offset
        if self.config.allow_negative_positions:
            return candidate
        return Point(max(0.0, candidate.x), max(0.0, candidate.y))

    def _move(self, event: PointerEvent) -> None:
        session = self._session
        if session is None:
            return
        candidate = self._candidate(event, session)
        size = self.store.planned(session.item_id).size
        self.bounds.maybe_grow(candidate, size)
        self.auto_scroller.tick(self.viewport.to_viewport(event.client))
        session.last_candidate = candidate
        session.max_displacement = max(
            session.max_displacement, session.start_client.distance_to(event.client)
        )
        self.store.set_live(session.item_id, candidate)

    def _release(self, event: PointerEvent) -> None:
        session = self._session
        if session is None:
            return
        try:
            z_index = self.z_order.allocate()
            committed = self.store.commit(session.item_id, session.last_candidate, z_index)
            moved = session.max_displacement > self.config.click_threshold
            logger.debug(
                "Drag committed for %s at (%s, %s) z=%s",
                session.item_id,
                committed.x,
                committed.y,
                z_index,
            )
        finally:
            self._end()
        if self._on_commit is not None:
            self._on_commit(DragCommit(item_id=session.item_id, position=committed, moved=moved))

    def _cancel(self, event: PointerEvent) -> None:
        logger.debug("Drag cancelled for pointer %s", event.pointer_id)
        self.abort()

    def _end(self) -> None:
        handle = self._handle
        self._session = None
        self._handle = None
        if handle is not None:
            handle.release()
