from __future__ import annotations

import io
import logging

import httpx
from PIL import Image

from domain.models import ImageDimensions
from domain.ports.probe import ImageProbe
from domain.services.dimension_probe import DEFAULT_FALLBACK_DIMENSIONS

logger = logging.getLogger(__name__)


class HttpImageProbe(ImageProbe):
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        base_url: str = "",
        fallback: ImageDimensions = DEFAULT_FALLBACK_DIMENSIONS,
    ) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.fallback = fallback

    def resolve(self, path: str) -> str:
        if path.startswith(("http://", "https://")) or not self.base_url:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def probe(self, path: str) -> ImageDimensions:
        url = self.resolve(path)
        try:
            if self._client is not None:
                content = await self._fetch(self._client, url)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    content = await self._fetch(client, url)
            with Image.open(io.BytesIO(content)) as image:
                width, height = image.size
        except (httpx.HTTPError, OSError, ValueError) as exc:
            logger.warning("Could not read image size from %s: %s", url, exc)
            return self.fallback
        return ImageDimensions(float(width), float(height))

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url)
        response.raise_for_status()
        return response.content
