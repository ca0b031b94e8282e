from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import orjson
import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.filesystem.json_utils import read_json, write_json_atomic
from adapters.filesystem.layout_repository import FileSystemLayoutRepository
from adapters.filesystem.media_repository import FileSystemMediaRepository
from app.config import AppSettings, load_settings
from app.replay import ReplayScript, apply_steps
from app.web_main import create_app
from app.wiring import build_gallery_planner, build_probe, build_session
from domain.models import MediaItem, Size
from domain.services.dimension_probe import probe_items

app = typer.Typer(no_args_is_help=True)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_settings(config: Path | None, seed: int | None) -> AppSettings:
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValidationError) as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if seed is not None:
        settings = settings.model_copy(
            update={"planner": settings.planner.model_copy(update={"seed": seed})}
        )
    return settings


def _load_media(media_file: Path) -> list[MediaItem]:
    if not media_file.exists():
        console.print(f"[red]File not found:[/] {media_file}")
        raise typer.Exit(code=1)
    try:
        return FileSystemMediaRepository().load(media_file)
    except (ValidationError, orjson.JSONDecodeError) as exc:
        console.print(f"[red]Invalid media list:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _emit(payload: dict[str, Any], output: Optional[Path]) -> None:
    if output is None:
        console.print_json(orjson.dumps(payload).decode("utf-8"))
        return
    console.print(f"[green]Wrote[/] {output}")


@app.command("plan")
def plan(
    media_file: Path = typer.Argument(..., help="JSON media list."),
    output: Optional[Path] = typer.Option(None, help="Write the render model here instead of stdout."),
    viewport_width: float = typer.Option(1280.0, min=1.0, help="Viewport width in px."),
    viewport_height: float = typer.Option(800.0, min=1.0, help="Viewport height in px."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    seed: Optional[int] = typer.Option(None, help="Random seed for a reproducible layout."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _configure_logging(verbose)
    settings = _load_settings(config, seed)
    items = _load_media(media_file)
    session = build_session(settings, Size(viewport_width, viewport_height))
    asyncio.run(session.load(items))
    model = session.render_model()
    if output is not None:
        FileSystemLayoutRepository().save_render_model(model, output)
    _emit(model.to_dict(), output)


@app.command("columns")
def columns(
    media_file: Path = typer.Argument(..., help="JSON media list."),
    output: Optional[Path] = typer.Option(None, help="Write the column layout here instead of stdout."),
    container_width: float = typer.Option(1200.0, min=1.0, help="Gallery container width in px."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    seed: Optional[int] = typer.Option(None, help="Random seed for a reproducible order."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _configure_logging(verbose)
    settings = _load_settings(config, seed)
    items = _load_media(media_file)
    probe = build_probe(settings)
    probed = asyncio.run(probe_items(probe, items, settings.planner.fallback_dimensions()))
    layout = build_gallery_planner(settings).plan(probed, container_width)
    if output is not None:
        FileSystemLayoutRepository().save_column_layout(layout, output)
    _emit(layout.to_dict(), output)


@app.command("replay")
def replay(
    media_file: Path = typer.Argument(..., help="JSON media list."),
    script_file: Path = typer.Argument(..., help="JSON list of pointer steps."),
    output: Optional[Path] = typer.Option(None, help="Write the final render model here."),
    viewport_width: float = typer.Option(1280.0, min=1.0, help="Viewport width in px."),
    viewport_height: float = typer.Option(800.0, min=1.0, help="Viewport height in px."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    seed: Optional[int] = typer.Option(None, help="Random seed for a reproducible layout."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _configure_logging(verbose)
    settings = _load_settings(config, seed)
    items = _load_media(media_file)
    if not script_file.exists():
        console.print(f"[red]File not found:[/] {script_file}")
        raise typer.Exit(code=1)
    try:
        data = read_json(script_file)
        script = ReplayScript.model_validate({"steps": data} if isinstance(data, list) else data)
    except (ValidationError, orjson.JSONDecodeError) as exc:
        console.print(f"[red]Invalid replay script:[/] {exc}")
        raise typer.Exit(code=1) from exc

    selections: list[str] = []
    session = build_session(
        settings, Size(viewport_width, viewport_height), on_item_selected=selections.append
    )
    asyncio.run(session.load(items))
    apply_steps(session, script.steps)
    payload = session.render_model().to_dict()
    payload["selected"] = selections
    if output is not None:
        write_json_atomic(output, payload)
    _emit(payload, output)


@app.command("validate")
def validate(media_file: Path = typer.Argument(..., help="Media list file to validate.")) -> None:
    items = _load_media(media_file)
    console.print(f"[green]Valid media list:[/] {media_file} ({len(items)} items)")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address, defaults to web.host."),
    port: Optional[int] = typer.Option(None, help="Bind port, defaults to web.port."),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    _configure_logging(verbose)
    settings = _load_settings(config, None)
    uvicorn.run(
        create_app(settings),
        host=host or settings.web.host,
        port=port or settings.web.port,
        log_level="debug" if verbose else "info",
    )


if __name__ == "__main__":
    app()
