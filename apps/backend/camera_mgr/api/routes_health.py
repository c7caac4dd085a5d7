from __future__ import annotations

from fastapi import APIRouter, Request

from camera_mgr.config.defaults import APP_VERSION

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def get_health(request: Request) -> dict[str, object]:
    state = request.app.state.camera_mgr
    registry = state.registry
    return {
        "ok": True,
        "version": APP_VERSION,
        "cameras": registry.count(),
        "registry_path": str(registry.registry_path),
        "last_flush_ok": registry.last_flush_ok,
    }
