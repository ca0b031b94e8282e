from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import List

from adapters.layout.position_planner import shuffle_in_place
from domain.models import ColumnLayout, ColumnPlacement, ProbedItem
from domain.ports.layout import GalleryPlanner


@dataclass(frozen=True)
class ColumnGalleryConfig:
    min_column_width: float = 300.0
    gap: float = 20.0
    max_columns: int = 4
    base_width: float = 280.0
    min_item_height: float = 200.0
    max_item_height: float = 500.0
    fallback_item_height: float = 300.0
    shuffle: bool = True

    def __post_init__(self) -> None:
        if self.max_columns < 1:
            msg = "max_columns must be >= 1"
            raise ValueError(msg)
        if self.min_column_width <= 0:
            msg = "min_column_width must be > 0"
            raise ValueError(msg)
        if self.gap < 0:
            msg = "gap must be >= 0"
            raise ValueError(msg)


class ColumnGalleryPlanner(GalleryPlanner):
    """Column ("pinterest") view: round-robin columns with clamped heights."""

    def __init__(
        self, config: ColumnGalleryConfig | None = None, rng: random.Random | None = None
    ) -> None:
        self.config = config or ColumnGalleryConfig()
        self.rng = rng or random.Random()

    def column_count(self, container_width: float) -> int:
        cfg = self.config
        possible = int((container_width + cfg.gap) // (cfg.min_column_width + cfg.gap))
        return max(1, min(possible, cfg.max_columns))

    def item_height(self, item: ProbedItem) -> float:
        cfg = self.config
        dimensions = item.dimensions
        if dimensions.fallback or dimensions.natural_width <= 0:
            return cfg.fallback_item_height
        height = cfg.base_width * dimensions.natural_height / dimensions.natural_width
        return max(cfg.min_item_height, min(cfg.max_item_height, height))

    def plan(self, items: Sequence[ProbedItem], container_width: float) -> ColumnLayout:
        cfg = self.config
        columns = self.column_count(container_width)
        column_width = max(0.0, (container_width - cfg.gap * (columns - 1)) / columns)
        ordered = list(items)
        if cfg.shuffle:
            shuffle_in_place(ordered, self.rng)

        heights = [0.0 for _ in range(columns)]
        placements: List[ColumnPlacement] = []
        for index, item in enumerate(ordered):
            column = index % columns
            y = heights[column] + (cfg.gap if heights[column] else 0.0)
            height = self.item_height(item)
            placements.append(
                ColumnPlacement(
                    item_id=item.item.id,
                    column=column,
                    x=column * (column_width + cfg.gap),
                    y=y,
                    width=column_width,
                    height=height,
                )
            )
            heights[column] = y + height

        return ColumnLayout(
            columns=columns,
            column_width=column_width,
            placements=placements,
            total_height=max(heights, default=0.0),
        )
