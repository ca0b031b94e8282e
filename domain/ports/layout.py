from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import ColumnLayout, LayoutPlan, ProbedItem, Size


class LayoutPlanner(Protocol):
    def plan(self, items: Sequence[ProbedItem], viewport: Size) -> LayoutPlan:
        ...


class GalleryPlanner(Protocol):
    def plan(self, items: Sequence[ProbedItem], container_width: float) -> ColumnLayout:
        ...
