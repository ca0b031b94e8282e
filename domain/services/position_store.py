from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace

from domain.models import Point, PositionedItem


class PositionStore:
    """Identity-keyed position records for one item-set session.

    Lookup order for an item's effective position is: live drag position, then
    the manual override committed by a finished drag, then the planned position.
    Live positions are transient and never survive a commit or abort.
    """

    def __init__(self, items: Iterable[PositionedItem] = ()) -> None:
        self._planned: dict[str, PositionedItem] = {}
        self._overrides: dict[str, Point] = {}
        self._live: dict[str, Point] = {}
        self.reset(items)

    def reset(self, items: Iterable[PositionedItem]) -> None:
        self._planned = {item.item_id: item for item in items}
        self._overrides.clear()
        self._live.clear()

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._planned

    def __iter__(self) -> Iterator[str]:
        return iter(self._planned)

    def __len__(self) -> int:
        return len(self._planned)

    def planned(self, item_id: str) -> PositionedItem:
        return self._planned[item_id]

    def override(self, item_id: str) -> Point | None:
        return self._overrides.get(item_id)

    def live(self, item_id: str) -> Point | None:
        return self._live.get(item_id)

    def effective(self, item_id: str) -> PositionedItem:
        record = self._planned[item_id]
        position = self._live.get(item_id)
        if position is None:
            position = self._overrides.get(item_id)
        if position is None:
            return replace(record)
        return replace(record, x=position.x, y=position.y)

    def effective_items(self) -> list[PositionedItem]:
        return [self.effective(item_id) for item_id in self._planned]

    def z_indices(self) -> list[int]:
        return [item.z_index for item in self._planned.values()]

    def set_live(self, item_id: str, position: Point) -> None:
        self._live[item_id] = position

    def clear_live(self, item_id: str) -> None:
        self._live.pop(item_id, None)

    def commit(self, item_id: str, position: Point, z_index: int) -> PositionedItem:
        self._live.pop(item_id, None)
        self._overrides[item_id] = position
        self._planned[item_id].z_index = z_index
        return self.effective(item_id)
