from __future__ import annotations

from domain.models import ORIGIN, Point, Size
from domain.services.canvas_bounds import CanvasBoundsManager


class Viewport:
    """Visible window onto the canvas.

    ``origin`` is the container's top-left in client coordinates and ``scroll``
    the canvas-space point shown at that corner. Scroll offsets are clamped to
    the current canvas bounds the way a scroll container clamps them.
    """

    def __init__(
        self,
        size: Size,
        bounds: CanvasBoundsManager,
        *,
        origin: Point = ORIGIN,
        scroll: Point = ORIGIN,
    ) -> None:
        self._size = size
        self._bounds = bounds
        self._origin = origin
        self._scroll = ORIGIN
        self.scroll_to(scroll.x, scroll.y)

    @property
    def size(self) -> Size:
        return self._size

    @property
    def origin(self) -> Point:
        return self._origin

    @property
    def scroll(self) -> Point:
        return self._scroll

    @property
    def max_scroll(self) -> Point:
        return Point(
            max(0.0, self._bounds.width - self._size.width),
            max(0.0, self._bounds.height - self._size.height),
        )

    def resize(self, size: Size) -> None:
        self._size = size
        self.scroll_to(self._scroll.x, self._scroll.y)

    def move_origin(self, origin: Point) -> None:
        self._origin = origin

    def to_viewport(self, client: Point) -> Point:
        return client - self._origin

    def to_canvas(self, client: Point) -> Point:
        return client - self._origin + self._scroll

    def scroll_to(self, x: float, y: float) -> Point:
        limit = self.max_scroll
        self._scroll = Point(min(max(0.0, x), limit.x), min(max(0.0, y), limit.y))
        return self._scroll

    def scroll_by(self, dx: float, dy: float) -> Point:
        before = self._scroll
        after = self.scroll_to(before.x + dx, before.y + dy)
        return after - before
