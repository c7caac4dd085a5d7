from __future__ import annotations

from collections.abc import Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
import threading

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from camera_mgr.api import routes_cameras, routes_health
from camera_mgr.api.errors import install_error_handlers
from camera_mgr.config.defaults import APP_VERSION
from camera_mgr.config.loader import load_settings
from camera_mgr.config.schema import AppSettings
from camera_mgr.registry.ids import create_allocator
from camera_mgr.registry.store import CameraRegistry
from camera_mgr.storage.registry_file import RegistryFile
from camera_mgr.util.logging import get_logger, setup_logging

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "OPTIONS"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Allow-Credentials": "true",
}


async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@dataclass
class CameraMgrState:
    settings: AppSettings
    registry: CameraRegistry
    _shutdown_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _shutdown_complete: bool = field(default=False, init=False, repr=False)

    @classmethod
    def create(
        cls,
        config_paths: Iterable[str | Path] = (),
        bind: str | None = None,
        port: int | None = None,
        base_url: str | None = None,
        registry_path: str | None = None,
        log_level: str = "info",
    ) -> "CameraMgrState":
        settings = load_settings(
            config_paths,
            bind=bind,
            port=port,
            base_url=base_url,
            registry_path=registry_path,
        )
        setup_logging(log_level, Path(settings.log_dir) if settings.log_dir else None)

        registry_file = RegistryFile(Path(str(settings.registry_path)))
        registry = CameraRegistry.hydrate(
            registry_file,
            base_url=settings.base_url,
            allocator=create_allocator(settings.id_policy),
        )
        logger.info("Camera registry ready with %d cameras (%s ids)", registry.count(), settings.id_policy)
        return cls(settings=settings, registry=registry)

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._shutdown_complete:
                return
            self._shutdown_complete = True
        self.registry.close()


def create_app(
    config_paths: Iterable[str | Path] = (),
    bind: str | None = None,
    port: int | None = None,
    base_url: str | None = None,
    registry_path: str | None = None,
    log_level: str = "info",
) -> FastAPI:
    state = CameraMgrState.create(
        config_paths=config_paths,
        bind=bind,
        port=port,
        base_url=base_url,
        registry_path=registry_path,
        log_level=log_level,
    )
    return build_app(state)


def build_app(state: CameraMgrState) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            yield
        finally:
            app.state.camera_mgr.shutdown()

    app = FastAPI(title="ClusterVMS Camera Manager", version=APP_VERSION, lifespan=lifespan)
    app.state.camera_mgr = state

    # The UI is served from another origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )
    # Outermost, so every response carries the same wildcard headers.
    app.middleware("http")(add_cors_headers)
    install_error_handlers(app)

    app.include_router(routes_cameras.router, prefix="/v0")
    app.include_router(routes_health.router, prefix="/v0")
    return app
