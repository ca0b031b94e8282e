from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from domain.models import (
    ORIGIN,
    CanvasBounds,
    Cursor,
    ImageDimensions,
    LayoutPlan,
    MediaItem,
    Point,
    PointerEvent,
    PointerTarget,
    RenderItem,
    RenderModel,
    Size,
    TargetKind,
)
from domain.ports.layout import LayoutPlanner
from domain.ports.probe import ImageProbe
from domain.services.background_pan import BackgroundPanController, PanConfig
from domain.services.canvas_bounds import CanvasBoundsManager, CanvasGrowthConfig
from domain.services.dimension_probe import DEFAULT_FALLBACK_DIMENSIONS, probe_items
from domain.services.drag_controller import DragCommit, DragConfig, DragController
from domain.services.edge_auto_scroll import AutoScrollConfig, EdgeAutoScroller
from domain.services.pointer_capture import PointerCapture
from domain.services.position_store import PositionStore
from domain.services.viewport import Viewport
from domain.services.z_order import ZOrderAllocator

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[str], None]


class GestureKind(StrEnum):
    DRAG = "drag"
    PAN = "pan"


@dataclass(frozen=True)
class SessionConfig:
    growth: CanvasGrowthConfig = field(default_factory=CanvasGrowthConfig)
    auto_scroll: AutoScrollConfig = field(default_factory=AutoScrollConfig)
    drag: DragConfig = field(default_factory=DragConfig)
    pan: PanConfig = field(default_factory=PanConfig)
    fallback_dimensions: ImageDimensions = DEFAULT_FALLBACK_DIMENSIONS


def _unique_by_id(items: Sequence[MediaItem]) -> list[MediaItem]:
    seen: set[str] = set()
    unique: list[MediaItem] = []
    for item in items:
        if item.id in seen:
            logger.warning("Skipping duplicate media item id %s", item.id)
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def _same_item_set(left: Sequence[MediaItem], right: Sequence[MediaItem]) -> bool:
    return {item.id: item for item in left} == {item.id: item for item in right}


class CanvasSession:
    """One freeform collage: layout, gestures and the render model.

    Pointer events are handled synchronously; only ``load``, ``relayout`` and
    ``resize_viewport`` await, on the image-dimension probes.
    """

    def __init__(
        self,
        *,
        planner: LayoutPlanner,
        probe: ImageProbe,
        viewport_size: Size,
        origin: Point = ORIGIN,
        config: SessionConfig | None = None,
        on_item_selected: SelectionCallback | None = None,
    ) -> None:
        self.planner = planner
        self.probe = probe
        self.config = config or SessionConfig()
        self.on_item_selected = on_item_selected

        self.bounds = CanvasBoundsManager(
            CanvasBounds(viewport_size.width, viewport_size.height), self.config.growth
        )
        self.viewport = Viewport(viewport_size, self.bounds, origin=origin)
        self.capture = PointerCapture()
        self.store = PositionStore()
        self.z_order = ZOrderAllocator()
        self.auto_scroller = EdgeAutoScroller(self.viewport, self.config.auto_scroll)
        self.drag = DragController(
            store=self.store,
            viewport=self.viewport,
            bounds=self.bounds,
            auto_scroller=self.auto_scroller,
            capture=self.capture,
            z_order=self.z_order,
            on_commit=self._handle_commit,
            config=self.config.drag,
        )
        self.pan = BackgroundPanController(
            viewport=self.viewport, capture=self.capture, config=self.config.pan
        )

        self._items: list[MediaItem] = []
        self._loaded = False
        self._generation = 0
        self._click_consumer: str | None = None

    @property
    def items(self) -> list[MediaItem]:
        return list(self._items)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def canvas_bounds(self) -> CanvasBounds:
        return self.bounds.bounds

    @property
    def active_gesture(self) -> GestureKind | None:
        if self.drag.active:
            return GestureKind.DRAG
        if self.pan.active:
            return GestureKind.PAN
        return None

    async def load(self, items: Sequence[MediaItem]) -> bool:
        """Accept a new item list; returns True when it triggered a layout pass.

        A list that only differs in order keeps the current arrangement.
        """
        unique = _unique_by_id(items)
        if self._loaded and _same_item_set(unique, self._items):
            self._items = unique
            return False
        self._items = unique
        await self._replan()
        return True

    async def relayout(self) -> None:
        await self._replan()

    async def _replan(self) -> None:
        self._generation += 1
        generation = self._generation
        items = list(self._items)
        probed = await probe_items(self.probe, items, self.config.fallback_dimensions)
        if generation != self._generation:
            logger.debug("Discarding stale layout pass %s", generation)
            return
        self.apply_plan(self.planner.plan(probed, self.viewport.size))

    def apply_plan(self, plan: LayoutPlan) -> None:
        self.drag.abort()
        self.pan.abort()
        self.store.reset(plan.items)
        self.bounds.reset(plan.bounds.at_least(self.viewport.size))
        self.z_order.reset_above(self.store.z_indices(), len(plan.items))
        self.viewport.scroll_to(0.0, 0.0)
        self._click_consumer = None
        self._loaded = True
        logger.info(
            "Layout applied: %s items on %sx%s canvas",
            len(plan.items),
            self.bounds.width,
            self.bounds.height,
        )

    async def resize_viewport(self, size: Size) -> None:
        """Resize the visible area and, once items are loaded, pack them again.

        Manual positions are dropped with the old layout.
        """
        self.bounds.reset(self.bounds.bounds.at_least(size))
        self.viewport.resize(size)
        if self._loaded:
            await self._replan()

    def move_container(self, origin: Point) -> None:
        self.viewport.move_origin(origin)

    def hit_test(self, client: Point) -> PointerTarget:
        point = self.viewport.to_canvas(client)
        # Later items paint over earlier ones at equal z.
        items = sorted(
            reversed(self.store.effective_items()), key=lambda item: item.z_index, reverse=True
        )
        for item in items:
            if item.rect.contains(point):
                return PointerTarget.item(item.item_id)
        return PointerTarget.background()

    def pointer_down(self, event: PointerEvent) -> GestureKind | None:
        if self.capture.active:
            logger.debug("Ignoring pointer %s: a gesture is already open", event.pointer_id)
            return None
        self._click_consumer = None
        target = event.target or self.hit_test(event.client)
        if target.kind == TargetKind.CONTROL:
            return None
        if self.pan.should_pan(event, target):
            if not self.pan.begin(event):
                return None
            if target.kind == TargetKind.ITEM:
                self._click_consumer = target.item_id
            return GestureKind.PAN
        if target.item_id is not None and self.drag.begin(event, target.item_id):
            return GestureKind.DRAG
        return None

    def pointer_move(self, event: PointerEvent) -> bool:
        return self.capture.dispatch_move(event)

    def pointer_up(self, event: PointerEvent) -> bool:
        return self.capture.dispatch_up(event)

    def pointer_cancel(self, event: PointerEvent) -> bool:
        return self.capture.dispatch_cancel(event)

    def click(self, target: PointerTarget) -> bool:
        """Handle a host click that follows a release.

        The click right after a gesture on the same item was already resolved at
        release time and is swallowed; a click with no preceding gesture selects.
        """
        if target.kind != TargetKind.ITEM or target.item_id is None:
            return False
        consumer = self._click_consumer
        self._click_consumer = None
        if consumer == target.item_id or self.capture.active:
            return False
        if target.item_id not in self.store:
            return False
        self._select(target.item_id)
        return True

    def render_model(self) -> RenderModel:
        dragging = self.drag.session.item_id if self.drag.session is not None else None
        items = [
            RenderItem(
                item_id=item.item_id,
                x=item.x,
                y=item.y,
                width=item.width,
                height=item.height,
                z_index=item.z_index,
                rotation=item.rotation,
                dragging=item.item_id == dragging,
            )
            for item in self.store.effective_items()
        ]
        cursor = Cursor.MOVE if self.drag.active else self.pan.cursor
        return RenderModel(
            items=items,
            bounds=self.bounds.bounds,
            scroll=self.viewport.scroll,
            cursor=cursor,
        )

    def _handle_commit(self, commit: DragCommit) -> None:
        self._click_consumer = commit.item_id
        if not commit.moved:
            self._select(commit.item_id)

    def _select(self, item_id: str) -> None:
        logger.debug("Item selected: %s", item_id)
        if self.on_item_selected is not None:
            self.on_item_selected(item_id)
