from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import ColumnLayout, MediaItem, RenderModel


class MediaRepository(Protocol):
    def load(self, path: Path) -> Sequence[MediaItem]: ...

    def save(self, items: Sequence[MediaItem], path: Path) -> None: ...


class LayoutRepository(Protocol):
    def save_render_model(self, model: RenderModel, path: Path) -> None: ...

    def save_column_layout(self, layout: ColumnLayout, path: Path) -> None: ...
