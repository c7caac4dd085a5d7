from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError

from camera_mgr.errors import PersistenceWriteError
from camera_mgr.registry.models import Camera
from camera_mgr.util.logging import get_logger

logger = get_logger(__name__)

LoadStatus = Literal["loaded", "missing", "corrupt"]


@dataclass
class LoadResult:
    cameras: dict[str, Camera] = field(default_factory=dict)
    status: LoadStatus = "loaded"


class RegistryFile:
    """Whole-registry snapshots stored as one JSON object keyed by camera id."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> LoadResult:
        if not self.path.exists():
            logger.info("No camera registry at %s; starting with an empty registry", self.path)
            return LoadResult(status="missing")
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            cameras = self._parse(raw)
        except (OSError, UnicodeDecodeError, RecursionError, json.JSONDecodeError, ValidationError, ValueError) as exc:
            logger.warning("Camera registry at %s is unreadable (%s); starting with an empty registry", self.path, exc)
            return LoadResult(status="corrupt")
        logger.info("Loaded %d cameras from %s", len(cameras), self.path)
        return LoadResult(cameras=cameras, status="loaded")

    def save(self, cameras: dict[str, Camera]) -> None:
        payload = {camera_id: camera.model_dump(mode="json") for camera_id, camera in cameras.items()}
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise PersistenceWriteError(f"Failed to write camera registry {self.path}: {exc}") from exc

    @staticmethod
    def _parse(raw: Any) -> dict[str, Camera]:
        if not isinstance(raw, dict):
            msg = "registry root must be an object"
            raise ValueError(msg)
        cameras: dict[str, Camera] = {}
        for camera_id, payload in raw.items():
            camera = Camera.model_validate(payload)
            if camera.id != camera_id:
                msg = f"camera key {camera_id!r} does not match embedded id {camera.id!r}"
                raise ValueError(msg)
            cameras[camera_id] = camera
        return cameras
