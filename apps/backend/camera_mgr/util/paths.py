from __future__ import annotations

import os
import sys
from pathlib import Path


def platform_default_data_dir() -> Path:
    home = Path.home()
    if sys.platform.startswith("win"):
        root = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return root / "clustervms"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "clustervms"
    return Path(os.environ.get("XDG_DATA_HOME", home / ".local" / "share")) / "clustervms"


def default_registry_path() -> Path:
    return platform_default_data_dir() / "cameras.json"


def resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()
