from __future__ import annotations

import os
from collections.abc import Callable

import pytest

from app.config import AppSettings, PlannerSettings
from domain.models import Size
from domain.services.canvas_session import CanvasSession
from tests.helpers.media_fixtures import StaticProbe, build_fixed_session

ENV_PREFIX = "COLLAGE_"


@pytest.fixture(autouse=True)
def isolated_collage_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host `COLLAGE_*` variables out of settings built by tests."""
    for key in [name for name in os.environ if name.startswith(ENV_PREFIX)]:
        monkeypatch.delenv(key)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(planner=PlannerSettings(seed=7))


@pytest.fixture
def app_settings_factory(app_settings: AppSettings) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return app_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def static_probe() -> StaticProbe:
    return StaticProbe()


@pytest.fixture
def fixed_session() -> CanvasSession:
    return build_fixed_session(viewport=Size(1000, 800))
