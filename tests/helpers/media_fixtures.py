from __future__ import annotations

import random
from collections.abc import Callable, Iterable, Mapping

from adapters.layout.position_planner import PositionPlanner
from domain.models import (
    CanvasBounds,
    ImageDimensions,
    LayoutPlan,
    MediaItem,
    PointerButton,
    PointerEvent,
    PointerTarget,
    PositionedItem,
    Size,
)
from domain.services.canvas_session import CanvasSession, SessionConfig


def make_items(count: int, prefix: str = "img") -> list[MediaItem]:
    return [
        MediaItem(id=f"{prefix}-{index}", name=f"Item {index}", path=f"{prefix}/{index}.png")
        for index in range(count)
    ]


class StaticProbe:
    """In-memory probe; paths in ``failing`` raise like a broken image load."""

    def __init__(
        self,
        dimensions: Mapping[str, ImageDimensions] | None = None,
        *,
        failing: Iterable[str] = (),
        default: ImageDimensions = ImageDimensions(800.0, 600.0),
    ) -> None:
        self.dimensions = dict(dimensions or {})
        self.failing = set(failing)
        self.default = default
        self.calls: list[str] = []

    async def probe(self, path: str) -> ImageDimensions:
        self.calls.append(path)
        if path in self.failing:
            raise OSError(f"cannot load {path}")
        return self.dimensions.get(path, self.default)


def fixed_plan() -> LayoutPlan:
    return LayoutPlan(
        items=[
            PositionedItem(item_id="a", x=100, y=100, width=200, height=150, z_index=1),
            PositionedItem(item_id="b", x=400, y=100, width=200, height=200, z_index=2),
            PositionedItem(item_id="c", x=100, y=400, width=150, height=150, z_index=2),
        ],
        bounds=CanvasBounds(2000, 1500),
    )


def build_fixed_session(
    *,
    viewport: Size = Size(1000, 800),
    config: SessionConfig | None = None,
    on_item_selected: Callable[[str], None] | None = None,
) -> CanvasSession:
    session = CanvasSession(
        planner=PositionPlanner(rng=random.Random(1)),
        probe=StaticProbe(),
        viewport_size=viewport,
        config=config,
        on_item_selected=on_item_selected,
    )
    session.apply_plan(fixed_plan())
    return session


def down(
    x: float,
    y: float,
    target: PointerTarget | None = None,
    *,
    pointer_id: int = 1,
    button: PointerButton = PointerButton.PRIMARY,
    modifiers: Iterable[str] = (),
) -> PointerEvent:
    return PointerEvent(
        client_x=x,
        client_y=y,
        pointer_id=pointer_id,
        button=button,
        modifiers=frozenset(modifiers),
        target=target,
    )


def at(x: float, y: float, *, pointer_id: int = 1) -> PointerEvent:
    return PointerEvent(client_x=x, client_y=y, pointer_id=pointer_id)


def seeded_planner(seed: int = 3) -> PositionPlanner:
    return PositionPlanner(rng=random.Random(seed))
