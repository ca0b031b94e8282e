from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config import AppSettings, GallerySettings, GestureSettings, load_settings


def test_defaults_match_engine_defaults() -> None:
    settings = AppSettings()
    session_config = settings.to_session_config()

    assert session_config.growth.buffer == 300
    assert session_config.growth.increment == 1000
    assert session_config.auto_scroll.margin == 100
    assert session_config.auto_scroll.step == 20
    assert session_config.drag.click_threshold == 4
    assert session_config.pan.modifier == "alt"
    assert session_config.fallback_dimensions.fallback is True
    assert settings.gallery.to_gallery_config().max_columns == 4


def test_nested_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLLAGE_CANVAS__GROWTH_INCREMENT", "500")
    monkeypatch.setenv("COLLAGE_GESTURE__PAN_MODIFIER", "Shift")

    settings = AppSettings()

    assert settings.canvas.growth_increment == 500
    assert settings.gesture.pan_modifier == "shift"


def test_load_settings_reads_yaml(tmp_path: Path) -> None:
    config_path = tmp_path / "collage.yaml"
    config_path.write_text(
        "planner:\n  seed: 12\n  max_overlap_ratio: 0.1\n"
        "auto_scroll:\n  step: 35\n"
        "media:\n  base_url: https://cdn.example.com\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.planner.seed == 12
    assert settings.planner.to_planner_config().max_overlap_ratio == 0.1
    assert settings.auto_scroll.step == 35
    assert settings.media.base_url == "https://cdn.example.com"


def test_env_wins_over_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "collage.yaml"
    config_path.write_text("auto_scroll:\n  step: 35\n", encoding="utf-8")
    monkeypatch.setenv("COLLAGE_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("COLLAGE_AUTO_SCROLL__STEP", "50")

    assert load_settings().auto_scroll.step == 50


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


def test_invalid_pan_modifier() -> None:
    with pytest.raises(ValidationError, match="pan_modifier"):
        GestureSettings(pan_modifier="hyper")


def test_gallery_height_range() -> None:
    with pytest.raises(ValidationError, match="min_item_height"):
        GallerySettings(min_item_height=600, max_item_height=500)


def test_file_settings_do_not_leak_into_plain_settings(tmp_path: Path) -> None:
    config_path = tmp_path / "collage.yaml"
    config_path.write_text("auto_scroll:\n  step: 35\n", encoding="utf-8")

    loaded = load_settings(config_path)

    assert isinstance(loaded, AppSettings)
    assert loaded.auto_scroll.step == 35
    assert AppSettings().auto_scroll.step == 20


def test_missing_config_named_by_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLLAGE_CONFIG_PATH", str(tmp_path / "absent.yaml"))

    with pytest.raises(FileNotFoundError, match="absent.yaml"):
        load_settings()
