from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import List

from adapters.filesystem.json_utils import read_json, write_json_atomic
from domain.models import MediaCollection, MediaItem
from domain.ports.repositories import MediaRepository


class FileSystemMediaRepository(MediaRepository):
    """JSON media lists: either a bare array or ``{"items": [...]}``."""

    def load(self, path: Path) -> List[MediaItem]:
        data = read_json(path)
        payload = {"items": data} if isinstance(data, list) else data
        return MediaCollection.model_validate(payload).items

    def save(self, items: Sequence[MediaItem], path: Path) -> None:
        collection = MediaCollection(items=list(items))
        write_json_atomic(path, collection.model_dump(mode="json"))
