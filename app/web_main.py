from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, List

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field, ValidationError

from app.config import AppSettings, load_settings
from app.wiring import build_gallery_planner, build_probe, build_session
from domain.models import MediaCollection, MediaItem, Size
from domain.ports.probe import ImageProbe
from domain.services.dimension_probe import probe_items

logger = logging.getLogger(__name__)


class FreeformLayoutRequest(BaseModel):
    items: List[MediaItem] = Field(default_factory=list)
    viewport_width: float = Field(..., gt=0)
    viewport_height: float = Field(..., gt=0)
    seed: int | None = None


class ColumnLayoutRequest(BaseModel):
    items: List[MediaItem] = Field(default_factory=list)
    container_width: float = Field(..., gt=0)
    seed: int | None = None


def _validated_items(items: List[MediaItem]) -> List[MediaItem]:
    try:
        return MediaCollection(items=items).items
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.errors()[0]["msg"]) from exc


def _with_seed(settings: AppSettings, seed: int | None) -> AppSettings:
    if seed is None:
        return settings
    return settings.model_copy(
        update={"planner": settings.planner.model_copy(update={"seed": seed})}
    )


def create_app(settings: AppSettings, probe: ImageProbe | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            app.state.http_client = client
            yield
            app.state.http_client = None

    app = FastAPI(title=settings.web.title, lifespan=lifespan)

    def resolve_probe(request: Request) -> ImageProbe:
        if probe is not None:
            return probe
        client = getattr(request.app.state, "http_client", None)
        return build_probe(settings, client)

    @app.get("/health")
    def health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.post("/api/layout/freeform")
    async def api_freeform_layout(
        payload: FreeformLayoutRequest, request: Request
    ) -> ORJSONResponse:
        items = _validated_items(payload.items)
        viewport = Size(payload.viewport_width, payload.viewport_height)
        session = build_session(
            _with_seed(settings, payload.seed), viewport, probe=resolve_probe(request)
        )
        await session.load(items)
        logger.info("Freeform layout planned for %s items", len(items))
        return ORJSONResponse(session.render_model().to_dict())

    @app.post("/api/layout/columns")
    async def api_column_layout(payload: ColumnLayoutRequest, request: Request) -> ORJSONResponse:
        items = _validated_items(payload.items)
        scoped = _with_seed(settings, payload.seed)
        probed = await probe_items(
            resolve_probe(request), items, scoped.planner.fallback_dimensions()
        )
        layout = build_gallery_planner(scoped).plan(probed, payload.container_width)
        logger.info("Column layout planned for %s items in %s columns", len(items), layout.columns)
        return ORJSONResponse(layout.to_dict())

    return app


def create_default_app() -> FastAPI:
    return create_app(load_settings())
