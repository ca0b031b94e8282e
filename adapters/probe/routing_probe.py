from __future__ import annotations

from domain.models import ImageDimensions
from domain.ports.probe import ImageProbe


def is_remote_path(path: str) -> bool:
    return path.startswith(("http://", "https://"))


class RoutingImageProbe(ImageProbe):
    def __init__(self, local: ImageProbe, remote: ImageProbe) -> None:
        self.local = local
        self.remote = remote

    async def probe(self, path: str) -> ImageDimensions:
        if is_remote_path(path):
            return await self.remote.probe(path)
        return await self.local.probe(path)
