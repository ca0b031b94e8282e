from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import orjson

_DUMP_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


def read_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=_DUMP_OPTIONS)


def write_json_atomic(path: Path, payload: Any) -> None:
    """Stage next to ``path`` and rename over it; readers see old or new, never half."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(f".{path.name}.partial")
    staging.write_bytes(dump_json_bytes(payload))
    os.replace(staging, path)
