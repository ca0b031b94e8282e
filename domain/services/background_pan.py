from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.models import Cursor, Point, PointerButton, PointerEvent, PointerTarget, TargetKind
from domain.services.pointer_capture import CaptureHandle, PointerCapture
from domain.services.viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PanConfig:
    modifier: str = "alt"


@dataclass(frozen=True)
class ViewportPanSession:
    pointer_id: int
    start_scroll: Point
    start_pointer: Point


class BackgroundPanController:
    def __init__(
        self,
        *,
        viewport: Viewport,
        capture: PointerCapture,
        config: PanConfig | None = None,
    ) -> None:
        self.viewport = viewport
        self.capture = capture
        self.config = config or PanConfig()
        self._session: ViewportPanSession | None = None
        self._handle: CaptureHandle | None = None

    @property
    def session(self) -> ViewportPanSession | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    @property
    def cursor(self) -> Cursor:
        return Cursor.GRABBING if self._session is not None else Cursor.GRAB

    def should_pan(self, event: PointerEvent, target: PointerTarget) -> bool:
        if target.kind == TargetKind.BACKGROUND:
            return True
        if event.button != PointerButton.PRIMARY:
            return True
        return self.config.modifier in event.modifiers

    def begin(self, event: PointerEvent) -> bool:
        if self.capture.active:
            logger.debug("Ignoring pan start: a gesture is already open")
            return False
        self._session = ViewportPanSession(
            pointer_id=event.pointer_id,
            start_scroll=self.viewport.scroll,
            start_pointer=event.client,
        )
        self._handle = self.capture.acquire(
            event.pointer_id,
            on_move=self._move,
            on_up=self._release,
            on_cancel=self._release,
        )
        logger.debug("Viewport pan started at %s", self._session.start_scroll)
        return True

    def abort(self) -> None:
        self._end()

    def _move(self, event: PointerEvent) -> None:
        session = self._session
        if session is None:
            return
        delta = event.client - session.start_pointer
        target = session.start_scroll - delta
        self.viewport.scroll_to(target.x, target.y)

    def _release(self, event: PointerEvent) -> None:
        logger.debug("Viewport pan ended at %s", self.viewport.scroll)
        self._end()

    def _end(self) -> None:
        handle = self._handle
        self._session = None
        self._handle = None
        if handle is not None:
            handle.release()
