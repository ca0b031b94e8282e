from __future__ import annotations

from pathlib import Path

from adapters.filesystem.json_utils import write_json_atomic
from domain.models import ColumnLayout, RenderModel
from domain.ports.repositories import LayoutRepository


class FileSystemLayoutRepository(LayoutRepository):
    def save_render_model(self, model: RenderModel, path: Path) -> None:
        write_json_atomic(path, model.to_dict())

    def save_column_layout(self, layout: ColumnLayout, path: Path) -> None:
        write_json_atomic(path, layout.to_dict())
