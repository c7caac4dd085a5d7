from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

StreamId = int | str
CameraId = str


class Stream(BaseModel):
    id: StreamId
    source_url: str
    recast_url: str | None = None

    def matches(self, stream_id: StreamId) -> bool:
        return str(self.id) == str(stream_id)


class Camera(BaseModel):
    # Assigned by the registry; ignored on create.
    id: CameraId | None = None
    name: str
    streams: list[Stream] = Field(default_factory=list)

    @field_validator("streams")
    @classmethod
    def unique_stream_ids(cls, value: list[Stream]) -> list[Stream]:
        seen: set[str] = set()
        for stream in value:
            key = str(stream.id)
            if key in seen:
                msg = f"duplicate stream id: {key}"
                raise ValueError(msg)
            seen.add(key)
        return value

    def get_stream(self, stream_id: StreamId) -> Stream | None:
        return next((stream for stream in self.streams if stream.matches(stream_id)), None)


class BasicCameraInfo(BaseModel):
    """Listing view of a camera without its streams."""

    id: CameraId
    name: str

    @classmethod
    def from_camera(cls, camera: Camera) -> "BasicCameraInfo":
        return cls(id=str(camera.id), name=camera.name)
