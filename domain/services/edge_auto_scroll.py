from __future__ import annotations

from dataclasses import dataclass

from domain.models import Point
from domain.services.viewport import Viewport


@dataclass(frozen=True)
class AutoScrollConfig:
    margin: float = 100.0
    step: float = 20.0


class EdgeAutoScroller:
    def __init__(self, viewport: Viewport, config: AutoScrollConfig | None = None) -> None:
        self.viewport = viewport
        self.config = config or AutoScrollConfig()

    def tick(self, pointer: Point) -> Point:
        """Scroll one constant step toward any edge the pointer is near.

        ``pointer`` is viewport-relative. Returns the scroll delta actually
        applied after clamping.
        """
        margin = self.config.margin
        step = self.config.step
        size = self.viewport.size
        dx = 0.0
        dy = 0.0
        if pointer.x < margin:
            dx = -step
        elif pointer.x > size.width - margin:
            dx = step
        if pointer.y < margin:
            dy = -step
        elif pointer.y > size.height - margin:
            dy = step
        if dx == 0.0 and dy == 0.0:
            return Point(0.0, 0.0)
        return self.viewport.scroll_by(dx, dy)
