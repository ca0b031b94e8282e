from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from PIL import Image

from domain.models import ImageDimensions
from domain.ports.probe import ImageProbe
from domain.services.dimension_probe import DEFAULT_FALLBACK_DIMENSIONS

logger = logging.getLogger(__name__)


class FileSystemImageProbe(ImageProbe):
    """Reads natural image size from disk without decoding pixel data.

    Relative paths resolve against ``root``; unreadable files resolve to the
    fallback dimensions.
    """

    def __init__(
        self,
        root: Path | None = None,
        fallback: ImageDimensions = DEFAULT_FALLBACK_DIMENSIONS,
    ) -> None:
        self.root = root
        self.fallback = fallback

    async def probe(self, path: str) -> ImageDimensions:
        return await asyncio.to_thread(self._read, self.resolve(path))

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if self.root is None or candidate.is_absolute():
            return candidate
        return self.root / candidate

    def _read(self, path: Path) -> ImageDimensions:
        try:
            with Image.open(path) as image:
                width, height = image.size
        except (OSError, ValueError) as exc:
            logger.warning("Could not read image size from %s: %s", path, exc)
            return self.fallback
        return ImageDimensions(float(width), float(height))
