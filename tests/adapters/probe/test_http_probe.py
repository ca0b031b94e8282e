from __future__ import annotations

import asyncio
import io

import httpx
from PIL import Image

from adapters.probe.http_probe import HttpImageProbe
from domain.models import ImageDimensions

FALLBACK = ImageDimensions(400, 400, fallback=True)


def _png_bytes(size: tuple[int, int]) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size).save(buffer, format="PNG")
    return buffer.getvalue()


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/media/cat.png":
        return httpx.Response(200, content=_png_bytes((640, 480)))
    if request.url.path == "/media/garbage.png":
        return httpx.Response(200, content=b"<html>not an image</html>")
    return httpx.Response(404)


def _probe_with_mock(path: str, *, base_url: str = "") -> tuple[ImageDimensions, list[str]]:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return _handler(request)

    async def run() -> ImageDimensions:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            probe = HttpImageProbe(client, base_url=base_url, fallback=FALLBACK)
            return await probe.probe(path)

    return asyncio.run(run()), seen


def test_reads_remote_image_size() -> None:
    dimensions, seen = _probe_with_mock("https://cdn.example.com/media/cat.png")

    assert dimensions == ImageDimensions(640, 480)
    assert seen == ["https://cdn.example.com/media/cat.png"]


def test_relative_paths_join_base_url() -> None:
    dimensions, seen = _probe_with_mock("/media/cat.png", base_url="https://cdn.example.com/")

    assert dimensions == ImageDimensions(640, 480)
    assert seen == ["https://cdn.example.com/media/cat.png"]


def test_not_found_resolves_to_fallback() -> None:
    dimensions, _ = _probe_with_mock("https://cdn.example.com/media/missing.png")

    assert dimensions == FALLBACK


def test_non_image_body_resolves_to_fallback() -> None:
    dimensions, _ = _probe_with_mock("https://cdn.example.com/media/garbage.png")

    assert dimensions == FALLBACK
