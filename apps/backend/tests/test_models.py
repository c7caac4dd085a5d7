from __future__ import annotations

import pytest
from pydantic import ValidationError

from camera_mgr.registry.models import BasicCameraInfo, Camera, Stream


def test_camera_defaults_to_no_id_and_no_streams() -> None:
    camera = Camera(name="Lobby")
    assert camera.id is None
    assert camera.streams == []


def test_stream_recast_url_is_optional() -> None:
    stream = Stream.model_validate({"id": 1, "source_url": "rtsp://cam1"})
    assert stream.recast_url is None
    assert stream.id == 1


def test_duplicate_stream_ids_are_rejected() -> None:
    with pytest.raises(ValidationError):
        Camera.model_validate(
            {
                "name": "Dock",
                "streams": [
                    {"id": 1, "source_url": "rtsp://a"},
                    {"id": "1", "source_url": "rtsp://b"},
                ],
            }
        )


def test_get_stream_matches_string_and_int_ids() -> None:
    camera = Camera(
        id="abc",
        name="Dock",
        streams=[Stream(id=1, source_url="rtsp://a"), Stream(id="sub", source_url="rtsp://b")],
    )
    assert camera.get_stream("1").source_url == "rtsp://a"
    assert camera.get_stream(1).source_url == "rtsp://a"
    assert camera.get_stream("sub").source_url == "rtsp://b"
    assert camera.get_stream("2") is None


def test_basic_projection_has_only_id_and_name() -> None:
    camera = Camera(id="abc", name="Lobby", streams=[Stream(id=1, source_url="rtsp://cam1")])
    info = BasicCameraInfo.from_camera(camera)
    assert info.model_dump(mode="json") == {"id": "abc", "name": "Lobby"}
