from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.models import CanvasBounds, Point, Size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanvasGrowthConfig:
    buffer: float = 300.0
    increment: float = 1000.0

    def __post_init__(self) -> None:
        if self.increment <= 0:
            msg = "growth increment must be > 0"
            raise ValueError(msg)
        if self.buffer < 0:
            msg = "growth buffer must be >= 0"
            raise ValueError(msg)


class CanvasBoundsManager:
    """Owns the logical canvas size for one item-set session.

    Bounds only ever grow, one fixed increment per axis per check, and there is
    no upper limit. ``reset`` is the only way to make them smaller and belongs to
    an item-set change.
    """

    def __init__(self, initial: CanvasBounds, config: CanvasGrowthConfig | None = None) -> None:
        self.config = config or CanvasGrowthConfig()
        self._bounds = initial

    @property
    def bounds(self) -> CanvasBounds:
        return self._bounds

    @property
    def width(self) -> float:
        return self._bounds.width

    @property
    def height(self) -> float:
        return self._bounds.height

    def reset(self, bounds: CanvasBounds) -> None:
        self._bounds = bounds

    def maybe_grow(self, candidate: Point, size: Size) -> bool:
        width = self._bounds.width
        height = self._bounds.height
        if candidate.x + size.width + self.config.buffer > width:
            width += self.config.increment
        if candidate.y + size.height + self.config.buffer > height:
            height += self.config.increment
        if width == self._bounds.width and height == self._bounds.height:
            return False
        logger.debug(
            "Canvas grown from %sx%s to %sx%s",
            self._bounds.width,
            self._bounds.height,
            width,
            height,
        )
        self._bounds = CanvasBounds(width, height)
        return True
