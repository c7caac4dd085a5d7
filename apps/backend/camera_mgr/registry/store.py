from __future__ import annotations

from pathlib import Path

from camera_mgr.errors import CameraIdMismatch, CameraNotFound, PersistenceWriteError, StreamNotFound
from camera_mgr.storage.registry_file import RegistryFile
from camera_mgr.util.logging import get_logger
from camera_mgr.util.rwlock import ReadWriteLock
from camera_mgr.util.security import validate_base_url

from .ids import IdAllocator, RandomIdAllocator
from .models import BasicCameraInfo, Camera, CameraId, Stream, StreamId

logger = get_logger(__name__)


def derive_recast_url(base_url: str, camera_id: CameraId, stream_id: StreamId) -> str | None:
    """Server-side re-broadcast URL for a stream, or None if ``base_url`` is unusable."""
    try:
        base = validate_base_url(base_url).rstrip("/")
    except ValueError:
        return None
    return f"{base}/v0/cameras/{camera_id}/streams/{stream_id}/sdp"


class CameraRegistry:
    """In-memory camera map shared by all request handlers.

    Reads take the shared side of a writer-preferring lock. Creates and
    replaces take the exclusive side and flush the whole map to disk before
    releasing it, so flushes land in the same order as the writes.

    Records handed out are always copies.
    """

    def __init__(
        self,
        registry_file: RegistryFile,
        base_url: str,
        allocator: IdAllocator | None = None,
        cameras: dict[CameraId, Camera] | None = None,
    ) -> None:
        self._file = registry_file
        self.base_url = base_url
        self._allocator = allocator or RandomIdAllocator()
        self._cameras: dict[CameraId, Camera] = {
            camera_id: camera.model_copy(deep=True) for camera_id, camera in (cameras or {}).items()
        }
        self._lock = ReadWriteLock()
        self._dirty = False
        self._last_flush_error: str | None = None

    @classmethod
    def hydrate(
        cls,
        registry_file: RegistryFile,
        base_url: str,
        allocator: IdAllocator | None = None,
    ) -> "CameraRegistry":
        result = registry_file.load()
        return cls(registry_file, base_url, allocator=allocator, cameras=result.cameras)

    @property
    def registry_path(self) -> Path:
        return self._file.path

    @property
    def last_flush_ok(self) -> bool:
        with self._lock.read_locked():
            return self._last_flush_error is None

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._cameras)

    def list_cameras(self) -> list[Camera]:
        with self._lock.read_locked():
            return [self._cameras[camera_id].model_copy(deep=True) for camera_id in sorted(self._cameras)]

    def list_basic(self) -> list[BasicCameraInfo]:
        with self._lock.read_locked():
            return [BasicCameraInfo.from_camera(self._cameras[camera_id]) for camera_id in sorted(self._cameras)]

    def get_camera(self, camera_id: CameraId) -> Camera:
        with self._lock.read_locked():
            camera = self._cameras.get(camera_id)
            if camera is None:
                raise CameraNotFound(camera_id)
            return camera.model_copy(deep=True)

    def get_stream(self, camera_id: CameraId, stream_id: StreamId) -> Stream:
        with self._lock.read_locked():
            camera = self._cameras.get(camera_id)
            stream = camera.get_stream(stream_id) if camera is not None else None
            if stream is None:
                raise StreamNotFound(camera_id, str(stream_id))
            return stream.model_copy(deep=True)

    def create_camera(self, candidate: Camera) -> Camera:
        camera = candidate.model_copy(deep=True)
        with self._lock.write_locked():
            # Allocation and insert share one critical section.
            camera_id = self._allocator.allocate(self._cameras.keys())
            camera.id = camera_id
            for stream in camera.streams:
                if stream.recast_url is None:
                    stream.recast_url = derive_recast_url(self.base_url, camera_id, stream.id)
                    if stream.recast_url is None:
                        logger.warning("Could not derive recast URL for camera %s stream %s", camera_id, stream.id)
            self._cameras[camera_id] = camera
            logger.info("Created camera %s (%s) with %d streams", camera_id, camera.name, len(camera.streams))
            self._flush()
            return camera.model_copy(deep=True)

    def replace_camera(self, camera_id: CameraId, candidate: Camera) -> Camera:
        if candidate.id != camera_id:
            logger.warning("Camera ID in URL (%s) did not match ID in camera object (%s); rejecting", camera_id, candidate.id)
            raise CameraIdMismatch(camera_id, candidate.id)
        camera = candidate.model_copy(deep=True)
        with self._lock.write_locked():
            if camera_id not in self._cameras:
                raise CameraNotFound(camera_id)
            self._cameras[camera_id] = camera
            logger.info("Replaced camera %s (%s)", camera_id, camera.name)
            self._flush()
            return camera.model_copy(deep=True)

    def close(self) -> None:
        with self._lock.write_locked():
            if self._dirty:
                logger.info("Retrying camera registry flush before shutdown")
                self._flush()

    def _flush(self) -> bool:
        # Caller holds the write lock. A failed flush leaves the in-memory change in place.
        try:
            self._file.save(self._cameras)
        except PersistenceWriteError as exc:
            self._dirty = True
            self._last_flush_error = str(exc)
            logger.error("Failed to write camera registry; error was %s", exc)
            return False
        self._dirty = False
        self._last_flush_error = None
        logger.info("Wrote camera registry to %s", self._file.path)
        return True
