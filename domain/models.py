from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaKind(StrEnum):
    IMAGE = "image"
    GIF = "gif"


class MediaItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    path: str = Field(..., min_length=1)
    kind: MediaKind = MediaKind.IMAGE


class MediaCollection(BaseModel):
    items: List[MediaItem] = Field(default_factory=list)

    @field_validator("items", mode="after")
    @classmethod
    def ensure_unique_item_ids(cls, items: List[MediaItem]) -> List[MediaItem]:
        seen: Set[str] = set()
        for item in items:
            if item.id in seen:
                msg = f"Duplicate media item id found: {item.id}"
                raise ValueError(msg)
            seen.add(item.id)
        return items


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Point) -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersection_area(self, other: Rect) -> float:
        overlap_x = max(0.0, min(self.right, other.right) - max(self.x, other.x))
        overlap_y = max(0.0, min(self.bottom, other.bottom) - max(self.y, other.y))
        return overlap_x * overlap_y

    def contains(self, point: Point) -> bool:
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom


@dataclass(frozen=True)
class ImageDimensions:
    natural_width: float
    natural_height: float
    fallback: bool = False

    @property
    def aspect_ratio(self) -> float:
        if self.natural_height <= 0:
            return 1.0
        return self.natural_width / self.natural_height


@dataclass(frozen=True)
class ProbedItem:
    item: MediaItem
    dimensions: ImageDimensions


@dataclass
class PositionedItem:
    item_id: str
    x: float
    y: float
    width: float
    height: float
    z_index: int
    rotation: Optional[float] = None

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class CanvasBounds:
    width: float
    height: float

    def at_least(self, size: Size) -> CanvasBounds:
        return CanvasBounds(max(self.width, size.width), max(self.height, size.height))


@dataclass(frozen=True)
class LayoutPlan:
    items: List[PositionedItem]
    bounds: CanvasBounds


@dataclass(frozen=True)
class ColumnPlacement:
    item_id: str
    column: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ColumnLayout:
    columns: int
    column_width: float
    placements: List[ColumnPlacement]
    total_height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": self.columns,
            "column_width": self.column_width,
            "total_height": self.total_height,
            "placements": [
                {
                    "item_id": placement.item_id,
                    "column": placement.column,
                    "x": placement.x,
                    "y": placement.y,
                    "width": placement.width,
                    "height": placement.height,
                }
                for placement in self.placements
            ],
        }


class PointerButton(IntEnum):
    # DOM MouseEvent.button numbering.
    PRIMARY = 0
    AUXILIARY = 1
    SECONDARY = 2


class TargetKind(StrEnum):
    ITEM = "item"
    CONTROL = "control"
    BACKGROUND = "background"


@dataclass(frozen=True)
class PointerTarget:
    kind: TargetKind
    item_id: str | None = None

    @classmethod
    def item(cls, item_id: str) -> PointerTarget:
        return cls(TargetKind.ITEM, item_id)

    @classmethod
    def control(cls, item_id: str) -> PointerTarget:
        return cls(TargetKind.CONTROL, item_id)

    @classmethod
    def background(cls) -> PointerTarget:
        return cls(TargetKind.BACKGROUND)


@dataclass(frozen=True)
class PointerEvent:
    client_x: float
    client_y: float
    pointer_id: int = 1
    button: PointerButton = PointerButton.PRIMARY
    modifiers: frozenset[str] = field(default_factory=frozenset)
    target: PointerTarget | None = None

    @property
    def client(self) -> Point:
        return Point(self.client_x, self.client_y)


class Cursor(StrEnum):
    GRAB = "grab"
    GRABBING = "grabbing"
    MOVE = "move"


@dataclass(frozen=True)
class RenderItem:
    item_id: str
    x: float
    y: float
    width: float
    height: float
    z_index: int
    rotation: Optional[float] = None
    dragging: bool = False


@dataclass(frozen=True)
class RenderModel:
    items: List[RenderItem]
    bounds: CanvasBounds
    scroll: Point
    cursor: Cursor

    def item(self, item_id: str) -> RenderItem:
        for render_item in self.items:
            if render_item.item_id == item_id:
                return render_item
        raise KeyError(item_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bounds": {"width": self.bounds.width, "height": self.bounds.height},
            "scroll": {"x": self.scroll.x, "y": self.scroll.y},
            "cursor": str(self.cursor),
            "items": [
                {
                    "item_id": item.item_id,
                    "x": item.x,
                    "y": item.y,
                    "width": item.width,
                    "height": item.height,
                    "z_index": item.z_index,
                    "rotation": item.rotation,
                    "dragging": item.dragging,
                }
                for item in self.items
            ],
        }
