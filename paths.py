from __future__ import annotations
import os
import sys
from pathlib import Path


APP_NAME = "HomeworkTracker"
DATA_DIR_ENV = "HOMEWORK_TRACKER_DATA_DIR"
DOCUMENT_FILENAME = "homework-manager-data.json"
PREFERENCES_FILENAME = "preferences.json"


def get_data_dir() -> Path:
    """
    Resolve the directory used for storing the homework document.
    Uses an environment override when provided, otherwise falls back to a
    per-OS user data location.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        base = Path(override).expanduser()
    else:
        home = Path.home()
        platform = sys.platform
        if platform == "darwin":
            base = home / "Library" / "Application Support" / APP_NAME
        elif platform.startswith("win"):
            roaming = os.environ.get("APPDATA")
            base = Path(roaming) / APP_NAME if roaming else home / "AppData" / "Roaming" / APP_NAME
        else:
            base = home / ".local" / "share" / "homework-tracker"

    base.mkdir(parents=True, exist_ok=True)
    return base


def data_path(filename: str | Path) -> Path:
    return get_data_dir() / Path(filename)
