from __future__ import annotations

from typing import Protocol

from domain.models import ImageDimensions


class ImageProbe(Protocol):
    async def probe(self, path: str) -> ImageDimensions: ...
