from __future__ import annotations

import bisect
import logging
import math
import random
from collections.abc import Iterator, MutableSequence, Sequence
from dataclasses import dataclass, field
from itertools import accumulate
from typing import List, Tuple, TypeVar

from domain.models import CanvasBounds, LayoutPlan, Point, PositionedItem, ProbedItem, Rect, Size
from domain.ports.layout import LayoutPlanner

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SizeCategory:
    name: str
    weight: float
    min_area: float
    max_area: float
    max_dimension_ratio: float  # of the planning canvas width


DEFAULT_SIZE_CATEGORIES: Tuple[SizeCategory, ...] = (
    SizeCategory("showcase", 0.15, 300_000, 500_000, 0.40),
    SizeCategory("large", 0.20, 200_000, 350_000, 0.30),
    SizeCategory("medium", 0.30, 150_000, 250_000, 0.25),
    SizeCategory("small_medium", 0.20, 80_000, 150_000, 0.20),
    SizeCategory("accent", 0.15, 40_000, 100_000, 0.12),
)


@dataclass(frozen=True)
class PlannerConfig:
    canvas_width_factor: float = 3.0
    grid_step: float = 15.0
    start_offset: float = 5.0
    right_padding: float = 10.0
    min_scan_height: float = 800.0
    scan_height_slack: float = 400.0
    max_overlap_ratio: float = 0.15
    random_attempts: int = 20
    min_side: float = 100.0
    min_aspect_ratio: float = 0.25
    max_aspect_ratio: float = 4.0
    margin: float = 50.0
    fallback_gap: float = 10.0
    fallback_x_jitter: float = 100.0
    base_z_max: int = 25
    size_categories: Tuple[SizeCategory, ...] = field(default=DEFAULT_SIZE_CATEGORIES)

    def __post_init__(self) -> None:
        if self.grid_step <= 0:
            msg = "grid_step must be > 0"
            raise ValueError(msg)
        if not 0 <= self.max_overlap_ratio < 1:
            msg = "max_overlap_ratio must be in [0, 1)"
            raise ValueError(msg)
        if not self.size_categories:
            msg = "at least one size category is required"
            raise ValueError(msg)
        total_weight = sum(category.weight for category in self.size_categories)
        if not math.isclose(total_weight, 1.0, abs_tol=1e-6):
            msg = "size category weights must sum to 1"
            raise ValueError(msg)
        if self.min_aspect_ratio <= 0 or self.min_aspect_ratio > self.max_aspect_ratio:
            msg = "aspect ratio limits must satisfy 0 < min <= max"
            raise ValueError(msg)


@dataclass(frozen=True)
class _SizedItem:
    item_id: str
    size: Size
    category: str


def shuffle_in_place(values: MutableSequence[T], rng: random.Random) -> None:
    """Fisher-Yates shuffle driven by ``rng``."""
    for i in range(len(values) - 1, 0, -1):
        j = rng.randint(0, i)
        values[i], values[j] = values[j], values[i]


def exceeds_overlap(candidate: Rect, placed: Rect, max_ratio: float) -> bool:
    allowed = min(candidate.area, placed.area) * max_ratio
    return candidate.intersection_area(placed) > allowed


def _frange(start: float, stop: float, step: float) -> Iterator[float]:
    value = start
    while value < stop:
        yield value
        value += step


class PositionPlanner(LayoutPlanner):
    """Size-varied, largest-first packing with bounded overlap.

    Output is randomized per call; pass a seeded ``random.Random`` for
    reproducible plans.
    """

    def __init__(self, config: PlannerConfig | None = None, rng: random.Random | None = None) -> None:
        self.config = config or PlannerConfig()
        self.rng = rng or random.Random()

    def plan(self, items: Sequence[ProbedItem], viewport: Size) -> LayoutPlan:
        if not items:
            return LayoutPlan(items=[], bounds=CanvasBounds(viewport.width, viewport.height))

        canvas_width = viewport.width * self.config.canvas_width_factor
        shuffled = list(items)
        shuffle_in_place(shuffled, self.rng)

        sized = [self._size_item(probed, canvas_width) for probed in shuffled]
        sized.sort(key=lambda entry: entry.size.area, reverse=True)

        occupied: List[Rect] = []
        positioned: List[PositionedItem] = []
        for entry in sized:
            position = self._find_position(entry.size, canvas_width, occupied)
            rect = Rect(position.x, position.y, entry.size.width, entry.size.height)
            occupied.append(rect)
            logger.debug(
                "Placed %s as %s at (%s, %s)", entry.item_id, entry.category, rect.x, rect.y
            )
            positioned.append(
                PositionedItem(
                    item_id=entry.item_id,
                    x=rect.x,
                    y=rect.y,
                    width=rect.width,
                    height=rect.height,
                    z_index=self.rng.randint(1, self.config.base_z_max),
                )
            )

        max_x = max(rect.right for rect in occupied)
        max_y = max(rect.bottom for rect in occupied)
        bounds = CanvasBounds(max_x + self.config.margin, max_y + self.config.margin).at_least(
            viewport
        )
        logger.info(
            "Packed %s items into %sx%s (viewport %sx%s)",
            len(positioned),
            round(bounds.width),
            round(bounds.height),
            viewport.width,
            viewport.height,
        )
        return LayoutPlan(items=positioned, bounds=bounds)

    def pick_category(self, draw: float) -> SizeCategory:
        categories = self.config.size_categories
        thresholds = list(accumulate(category.weight for category in categories))
        index = bisect.bisect_right(thresholds, draw)
        return categories[min(index, len(categories) - 1)]

    def display_size(self, aspect_ratio: float, target_area: float, max_dimension: float) -> Size:
        ratio = min(max(aspect_ratio, self.config.min_aspect_ratio), self.config.max_aspect_ratio)
        base = math.sqrt(target_area)
        if ratio > 1.5:
            width = min(base * 1.4, max_dimension)
            height = width / ratio
        elif ratio > 0.75:
            if ratio > 1:
                width = min(base, max_dimension)
                height = width / ratio
            else:
                height = min(base, max_dimension * 0.8)
                width = height * ratio
        else:
            height = min(base * 1.3, max_dimension * 1.2)
            width = height * ratio
        return Size(max(width, self.config.min_side), max(height, self.config.min_side))

    def _size_item(self, probed: ProbedItem, canvas_width: float) -> _SizedItem:
        category = self.pick_category(self.rng.random())
        target_area = category.min_area + self.rng.random() * (category.max_area - category.min_area)
        size = self.display_size(
            probed.dimensions.aspect_ratio,
            target_area,
            canvas_width * category.max_dimension_ratio,
        )
        return _SizedItem(item_id=probed.item.id, size=size, category=category.name)

    def _find_position(self, size: Size, canvas_width: float, occupied: Sequence[Rect]) -> Point:
        cfg = self.config
        start = cfg.start_offset
        max_x = canvas_width - size.width - cfg.right_padding
        lowest = max((rect.bottom for rect in occupied), default=0.0)
        scan_height = max(cfg.min_scan_height, lowest) + cfg.scan_height_slack

        for y in _frange(start, scan_height, cfg.grid_step):
            # Only boxes crossing this row band can collide with the candidate.
            row = [rect for rect in occupied if rect.y < y + size.height and rect.bottom > y]
            for x in _frange(start, max_x, cfg.grid_step):
                if self._fits(Rect(x, y, size.width, size.height), row):
                    return Point(x, y)

        for _ in range(cfg.random_attempts):
            x = self.rng.random() * max(0.0, max_x - start) + start
            y = self.rng.random() * scan_height + start
            if self._fits(Rect(x, y, size.width, size.height), occupied):
                return Point(x, y)

        logger.debug("No packed slot for %sx%s, placing below content", size.width, size.height)
        return Point(start + self.rng.random() * cfg.fallback_x_jitter, lowest + cfg.fallback_gap)

    def _fits(self, candidate: Rect, occupied: Sequence[Rect]) -> bool:
        ratio = self.config.max_overlap_ratio
        return not any(exceeds_overlap(candidate, rect, ratio) for rect in occupied)
