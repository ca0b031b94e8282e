from __future__ import annotations

import random
from collections.abc import Callable

import httpx

from adapters.layout.column_gallery import ColumnGalleryPlanner
from adapters.layout.position_planner import PositionPlanner
from adapters.probe.filesystem_probe import FileSystemImageProbe
from adapters.probe.http_probe import HttpImageProbe
from adapters.probe.routing_probe import RoutingImageProbe
from app.config import AppSettings
from domain.models import Size
from domain.ports.probe import ImageProbe
from domain.services.canvas_session import CanvasSession


def _build_rng(settings: AppSettings) -> random.Random:
    return random.Random(settings.planner.seed)


def build_probe(settings: AppSettings, client: httpx.AsyncClient | None = None) -> ImageProbe:
    fallback = settings.planner.fallback_dimensions()
    if settings.media.base_url:
        return HttpImageProbe(client, base_url=settings.media.base_url, fallback=fallback)
    return RoutingImageProbe(
        local=FileSystemImageProbe(root=settings.media.root_dir, fallback=fallback),
        remote=HttpImageProbe(client, fallback=fallback),
    )


def build_planner(settings: AppSettings) -> PositionPlanner:
    return PositionPlanner(settings.planner.to_planner_config(), rng=_build_rng(settings))


def build_gallery_planner(settings: AppSettings) -> ColumnGalleryPlanner:
    return ColumnGalleryPlanner(settings.gallery.to_gallery_config(), rng=_build_rng(settings))


def build_session(
    settings: AppSettings,
    viewport: Size,
    *,
    probe: ImageProbe | None = None,
    on_item_selected: Callable[[str], None] | None = None,
) -> CanvasSession:
    return CanvasSession(
        planner=build_planner(settings),
        probe=probe or build_probe(settings),
        viewport_size=viewport,
        config=settings.to_session_config(),
        on_item_selected=on_item_selected,
    )
