from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from camera_mgr.errors import AllocationExhausted, CameraIdMismatch, NotFoundError
from camera_mgr.registry.models import Camera
from camera_mgr.registry.store import CameraRegistry
from camera_mgr.util.security import validate_camera_id

router = APIRouter(prefix="/cameras", tags=["cameras"])


def _registry(request: Request) -> CameraRegistry:
    return request.app.state.camera_mgr.registry


def _checked_camera_id(camera_id: str) -> str:
    try:
        return validate_camera_id(camera_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("")
def list_cameras(request: Request, view: str | None = Query(default=None, alias="format")) -> list[dict[str, object]]:
    registry = _registry(request)
    if view == "full":
        return [camera.model_dump(mode="json") for camera in registry.list_cameras()]
    return [info.model_dump(mode="json") for info in registry.list_basic()]


@router.get("/{camera_id}")
def get_camera(camera_id: str, request: Request) -> dict[str, object]:
    camera_id = _checked_camera_id(camera_id)
    try:
        camera = _registry(request).get_camera(camera_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404) from exc
    return camera.model_dump(mode="json")


@router.post("")
def create_camera(payload: Camera, request: Request) -> dict[str, object]:
    """Store a new camera under a server-assigned id; any id in the body is ignored."""
    try:
        camera = _registry(request).create_camera(payload)
    except AllocationExhausted as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return camera.model_dump(mode="json")


@router.put("/{camera_id}")
def replace_camera(camera_id: str, payload: Camera, request: Request) -> dict[str, object]:
    camera_id = _checked_camera_id(camera_id)
    try:
        camera = _registry(request).replace_camera(camera_id, payload)
    except CameraIdMismatch as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404) from exc
    return camera.model_dump(mode="json")


@router.get("/{camera_id}/streams/{stream_id}")
def get_stream(camera_id: str, stream_id: str, request: Request) -> dict[str, object]:
    camera_id = _checked_camera_id(camera_id)
    try:
        stream = _registry(request).get_stream(camera_id, stream_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404) from exc
    return stream.model_dump(mode="json")
