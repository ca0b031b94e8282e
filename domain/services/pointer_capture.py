from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType

from domain.models import PointerEvent

logger = logging.getLogger(__name__)

PointerHandler = Callable[[PointerEvent], None]


@dataclass(frozen=True)
class _Subscription:
    pointer_id: int
    on_move: PointerHandler
    on_up: PointerHandler
    on_cancel: PointerHandler


class CaptureHandle:
    def __init__(self, capture: PointerCapture, subscription: _Subscription) -> None:
        self._capture = capture
        self._subscription = subscription
        self._released = False

    @property
    def active(self) -> bool:
        return not self._released

    @property
    def pointer_id(self) -> int:
        return self._subscription.pointer_id

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._capture._unsubscribe(self._subscription)

    def __enter__(self) -> CaptureHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


class PointerCapture:
    """Document-level pointer listeners that exist only while a gesture is open.

    At most one subscription is held at a time; events from other pointers are
    dropped while it is held.
    """

    def __init__(self) -> None:
        self._subscription: _Subscription | None = None
        self._handle: CaptureHandle | None = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def acquire(
        self,
        pointer_id: int,
        *,
        on_move: PointerHandler,
        on_up: PointerHandler,
        on_cancel: PointerHandler,
    ) -> CaptureHandle:
        if self._subscription is not None:
            msg = "Pointer capture is already held by another gesture"
            raise RuntimeError(msg)
        subscription = _Subscription(pointer_id, on_move, on_up, on_cancel)
        self._subscription = subscription
        self._handle = CaptureHandle(self, subscription)
        logger.debug("Pointer %s captured", pointer_id)
        return self._handle

    def dispatch_move(self, event: PointerEvent) -> bool:
        subscription = self._matching(event)
        if subscription is None:
            return False
        subscription.on_move(event)
        return True

    def dispatch_up(self, event: PointerEvent) -> bool:
        subscription = self._matching(event)
        if subscription is None:
            return False
        subscription.on_up(event)
        return True

    def dispatch_cancel(self, event: PointerEvent) -> bool:
        subscription = self._matching(event)
        if subscription is None:
            return False
        subscription.on_cancel(event)
        return True

    def release_all(self) -> None:
        if self._handle is not None:
            self._handle.release()

    def _matching(self, event: PointerEvent) -> _Subscription | None:
        subscription = self._subscription
        if subscription is None or subscription.pointer_id != event.pointer_id:
            return None
        return subscription

    def _unsubscribe(self, subscription: _Subscription) -> None:
        if self._subscription is subscription:
            self._subscription = None
            self._handle = None
            logger.debug("Pointer %s released", subscription.pointer_id)
