from __future__ import annotations

import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from camera_mgr.errors import ConfigError
from camera_mgr.util.logging import get_logger
from camera_mgr.util.paths import default_registry_path, resolve_path

from .schema import AppSettings

logger = get_logger(__name__)


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc


def load_settings(config_paths: Iterable[str | Path] = (), **overrides: Any) -> AppSettings:
    """Merge TOML config files in order, then apply non-None overrides.

    Keys this service does not know about are ignored; the files may be shared
    with other ClusterVMS services.
    """
    merged: dict[str, Any] = {}
    for raw_path in config_paths:
        path = resolve_path(raw_path)
        merged.update(read_config_file(path))
        logger.debug("Read config file %s", path)

    merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        settings = AppSettings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    registry_path = resolve_path(settings.registry_path) if settings.registry_path else default_registry_path()
    return settings.model_copy(update={"registry_path": str(registry_path)})
