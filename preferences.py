from __future__ import annotations
import logging
from pathlib import Path
from models import STICKY_COLORS
from paths import PREFERENCES_FILENAME, data_path
from storage import load_json, save_json


logger = logging.getLogger(__name__)

DEFAULT_TODO_COLOR = "yellow"


def _preferences_path(path: Path | str | None) -> Path:
    return Path(path) if path is not None else data_path(PREFERENCES_FILENAME)


def load_todo_color(path: Path | str | None = None) -> str:
    data = load_json(_preferences_path(path))
    color = data.get("todoColor") if isinstance(data, dict) else None
    if color not in STICKY_COLORS:
        return DEFAULT_TODO_COLOR
    return color


def save_todo_color(color: str, path: Path | str | None = None) -> None:
    if color not in STICKY_COLORS:
        raise ValueError(f"Unknown sticky note color: {color!r}")
    target = _preferences_path(path)
    data = load_json(target)
    if not isinstance(data, dict):
        data = {}
    data["todoColor"] = color
    save_json(target, data)
    logger.debug("Saved to-do note color %s", color)
