from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .defaults import DEFAULT_BASE_URL, DEFAULT_BIND, DEFAULT_ID_POLICY, DEFAULT_PORT


class AppSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    bind: str = DEFAULT_BIND
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    registry_path: str | None = None
    id_policy: Literal["random", "monotonic"] = DEFAULT_ID_POLICY
    log_dir: str | None = None

    @field_validator("base_url")
    @classmethod
    def base_url_not_empty(cls, value: str) -> str:
        if not value.strip():
            msg = "base_url cannot be empty"
            raise ValueError(msg)
        return value.strip()
