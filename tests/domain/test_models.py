from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.models import CanvasBounds, MediaCollection, MediaKind, Point, Rect, Size


def test_media_collection_rejects_duplicate_ids() -> None:
    payload = {
        "items": [
            {"id": "1", "name": "Moonchild", "path": "gifs/1.gif", "kind": "gif"},
            {"id": "1", "name": "Pulse", "path": "gifs/2.gif", "kind": "gif"},
        ]
    }

    with pytest.raises(ValidationError, match="Duplicate media item id"):
        MediaCollection.model_validate(payload)


def test_media_item_defaults_to_image_and_is_frozen() -> None:
    collection = MediaCollection.model_validate({"items": [{"id": "1", "path": "a.png"}]})
    item = collection.items[0]

    assert item.kind == MediaKind.IMAGE
    with pytest.raises(ValidationError):
        item.name = "changed"  # type: ignore[misc]


def test_rect_intersection_area() -> None:
    left = Rect(0, 0, 100, 100)

    assert left.intersection_area(Rect(50, 50, 100, 100)) == 2500
    assert left.intersection_area(Rect(100, 0, 50, 50)) == 0
    assert left.intersection_area(Rect(300, 300, 10, 10)) == 0


def test_bounds_at_least_viewport() -> None:
    assert CanvasBounds(500, 2000).at_least(Size(1000, 800)) == CanvasBounds(1000, 2000)


def test_point_arithmetic() -> None:
    assert Point(3, 4) - Point(1, 1) == Point(2, 3)
    assert Point(0, 0).distance_to(Point(3, 4)) == 5
