from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.column_gallery import ColumnGalleryConfig
from adapters.layout.position_planner import PlannerConfig
from domain.models import ImageDimensions
from domain.services.background_pan import PanConfig
from domain.services.canvas_bounds import CanvasGrowthConfig
from domain.services.canvas_session import SessionConfig
from domain.services.drag_controller import DragConfig
from domain.services.edge_auto_scroll import AutoScrollConfig

DEFAULT_CONFIG_PATH = Path("config/collage.yaml")

_MODIFIER_KEYS = {"alt", "shift", "ctrl", "meta", "space"}


class PlannerSettings(BaseModel):
    canvas_width_factor: float = Field(default=3.0, gt=0)
    grid_step: float = Field(default=15.0, gt=0)
    max_overlap_ratio: float = Field(default=0.15, ge=0, lt=1)
    random_attempts: int = Field(default=20, ge=0)
    min_side: float = Field(default=100.0, gt=0)
    margin: float = Field(default=50.0, ge=0)
    base_z_max: int = Field(default=25, ge=1)
    fallback_width: float = Field(default=400.0, gt=0)
    fallback_height: float = Field(default=400.0, gt=0)
    seed: int | None = None

    def to_planner_config(self) -> PlannerConfig:
        return PlannerConfig(
            canvas_width_factor=self.canvas_width_factor,
            grid_step=self.grid_step,
            max_overlap_ratio=self.max_overlap_ratio,
            random_attempts=self.random_attempts,
            min_side=self.min_side,
            margin=self.margin,
            base_z_max=self.base_z_max,
        )

    def fallback_dimensions(self) -> ImageDimensions:
        return ImageDimensions(self.fallback_width, self.fallback_height, fallback=True)


class CanvasSettings(BaseModel):
    growth_buffer: float = Field(default=300.0, ge=0)
    growth_increment: float = Field(default=1000.0, gt=0)

    def to_growth_config(self) -> CanvasGrowthConfig:
        return CanvasGrowthConfig(buffer=self.growth_buffer, increment=self.growth_increment)


class AutoScrollSettings(BaseModel):
    margin: float = Field(default=100.0, ge=0)
    step: float = Field(default=20.0, gt=0)

    def to_auto_scroll_config(self) -> AutoScrollConfig:
        return AutoScrollConfig(margin=self.margin, step=self.step)


class GestureSettings(BaseModel):
    click_threshold: float = Field(default=4.0, ge=0)
    pan_modifier: str = "alt"
    allow_negative_positions: bool = False

    @field_validator("pan_modifier", mode="before")
    @classmethod
    def normalize_modifier(cls, value: object) -> str:
        normalized = str(value or "").strip().lower()
        if normalized not in _MODIFIER_KEYS:
            msg = f"gesture.pan_modifier must be one of {sorted(_MODIFIER_KEYS)}"
            raise ValueError(msg)
        return normalized

    def to_drag_config(self) -> DragConfig:
        return DragConfig(
            click_threshold=self.click_threshold,
            allow_negative_positions=self.allow_negative_positions,
        )

    def to_pan_config(self) -> PanConfig:
        return PanConfig(modifier=self.pan_modifier)


class GallerySettings(BaseModel):
    min_column_width: float = Field(default=300.0, gt=0)
    gap: float = Field(default=20.0, ge=0)
    max_columns: int = Field(default=4, ge=1)
    base_width: float = Field(default=280.0, gt=0)
    min_item_height: float = Field(default=200.0, gt=0)
    max_item_height: float = Field(default=500.0, gt=0)
    fallback_item_height: float = Field(default=300.0, gt=0)

    @model_validator(mode="after")
    def ensure_height_range(self) -> GallerySettings:
        if self.min_item_height > self.max_item_height:
            msg = "gallery.min_item_height must not exceed gallery.max_item_height"
            raise ValueError(msg)
        return self

    def to_gallery_config(self) -> ColumnGalleryConfig:
        return ColumnGalleryConfig(
            min_column_width=self.min_column_width,
            gap=self.gap,
            max_columns=self.max_columns,
            base_width=self.base_width,
            min_item_height=self.min_item_height,
            max_item_height=self.max_item_height,
            fallback_item_height=self.fallback_item_height,
        )


class MediaSettings(BaseModel):
    root_dir: Path = Path(".")
    base_url: str = ""


class WebSettings(BaseModel):
    title: str = "Collage Canvas"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COLLAGE_", env_nested_delimiter="__")

    planner: PlannerSettings = PlannerSettings()
    canvas: CanvasSettings = CanvasSettings()
    auto_scroll: AutoScrollSettings = AutoScrollSettings()
    gesture: GestureSettings = GestureSettings()
    gallery: GallerySettings = GallerySettings()
    media: MediaSettings = MediaSettings()
    web: WebSettings = WebSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML sits below env so deployments can override single keys.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    def to_session_config(self) -> SessionConfig:
        return SessionConfig(
            growth=self.canvas.to_growth_config(),
            auto_scroll=self.auto_scroll.to_auto_scroll_config(),
            drag=self.gesture.to_drag_config(),
            pan=self.gesture.to_pan_config(),
            fallback_dimensions=self.planner.fallback_dimensions(),
        )


def _resolve_config_path(config_path: Path | None) -> Path | None:
    if config_path is not None:
        return config_path
    env_path = os.getenv("COLLAGE_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def load_settings(config_path: Path | None = None) -> AppSettings:
    """Build settings from env over an optional YAML file.

    An explicitly requested file (argument or ``COLLAGE_CONFIG_PATH``) must exist.
    """
    path = _resolve_config_path(config_path)
    if path is None:
        return AppSettings()
    if not path.is_file():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    class FileBackedSettings(AppSettings):
        model_config = SettingsConfigDict(yaml_file=path, yaml_file_encoding="utf-8")

    return FileBackedSettings()
