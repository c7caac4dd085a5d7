from __future__ import annotations

import json

import pytest

from camera_mgr.errors import PersistenceWriteError
from camera_mgr.registry.models import Camera, Stream
from camera_mgr.storage.registry_file import RegistryFile


def _multi_stream_camera() -> Camera:
    return Camera(
        id="Ab3dE6gH",
        name="Loading Dock",
        streams=[
            Stream(id=1, source_url="rtsp://dock/main", recast_url="http://vms.local/v0/cameras/Ab3dE6gH/streams/1/sdp"),
            Stream(id="sub", source_url="rtsp://dock/sub"),
        ],
    )


def test_missing_file_loads_empty(tmp_path) -> None:
    result = RegistryFile(tmp_path / "cameras.json").load()
    assert result.status == "missing"
    assert result.cameras == {}


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        json.dumps({"abc": {"id": "xyz", "name": "Wrong key", "streams": []}}),
        json.dumps({"abc": {"id": "abc", "streams": []}}),
        "[" * 200_000 + "]" * 200_000,
    ],
)
def test_malformed_file_loads_empty(tmp_path, content: str) -> None:
    path = tmp_path / "cameras.json"
    path.write_text(content, encoding="utf-8")
    result = RegistryFile(path).load()
    assert result.status == "corrupt"
    assert result.cameras == {}


@pytest.mark.parametrize(
    "cameras",
    [
        {},
        {"one": Camera(id="one", name="Lobby", streams=[Stream(id=1, source_url="rtsp://cam1")])},
        {"Ab3dE6gH": _multi_stream_camera(), "two": Camera(id="two", name="Gate")},
    ],
)
def test_save_then_load_round_trips(tmp_path, cameras: dict[str, Camera]) -> None:
    registry_file = RegistryFile(tmp_path / "nested" / "cameras.json")
    registry_file.save(cameras)
    result = registry_file.load()
    assert result.status == "loaded"
    assert result.cameras == cameras


def test_save_writes_object_keyed_by_camera_id(tmp_path) -> None:
    path = tmp_path / "cameras.json"
    RegistryFile(path).save({"Ab3dE6gH": _multi_stream_camera()})
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert list(payload) == ["Ab3dE6gH"]
    assert payload["Ab3dE6gH"]["name"] == "Loading Dock"
    assert payload["Ab3dE6gH"]["streams"][1] == {"id": "sub", "source_url": "rtsp://dock/sub", "recast_url": None}


def test_save_replaces_previous_snapshot_and_leaves_no_temp_file(tmp_path) -> None:
    path = tmp_path / "cameras.json"
    registry_file = RegistryFile(path)
    registry_file.save({"one": Camera(id="one", name="Old")})
    registry_file.save({"two": Camera(id="two", name="New")})
    assert set(registry_file.load().cameras) == {"two"}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["cameras.json"]


def test_save_failure_raises_persistence_error(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(PersistenceWriteError):
        RegistryFile(blocker / "cameras.json").save({})
