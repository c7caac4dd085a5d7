from __future__ import annotations


class CameraMgrError(Exception):
    """Base class for camera manager failures."""


class NotFoundError(CameraMgrError):
    pass


class CameraNotFound(NotFoundError):
    def __init__(self, camera_id: str) -> None:
        self.camera_id = camera_id
        super().__init__(f"Camera not found: {camera_id}")


class StreamNotFound(NotFoundError):
    def __init__(self, camera_id: str, stream_id: str) -> None:
        self.camera_id = camera_id
        self.stream_id = stream_id
        super().__init__(f"Stream not found: {camera_id}/{stream_id}")


class ValidationRejected(CameraMgrError):
    pass


class CameraIdMismatch(ValidationRejected):
    def __init__(self, path_id: str, body_id: str | None) -> None:
        self.path_id = path_id
        self.body_id = body_id
        super().__init__("Camera ID in URL does not match camera object")


class PersistenceWriteError(CameraMgrError):
    pass


class AllocationExhausted(CameraMgrError):
    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not allocate a free camera id after {attempts} attempts")


class ConfigError(CameraMgrError):
    pass
