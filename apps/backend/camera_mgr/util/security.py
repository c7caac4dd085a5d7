from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

STREAM_PASSWORD_RE = re.compile(r"((?:rtsps?|rtmps?|https?|srt)://[^:@/\s]+:)([^@/\s]+)(@)", re.IGNORECASE)
PASSWORD_PAIR_RE = re.compile(r"(password\s*[=:]\s*)([^\s,;]+)", re.IGNORECASE)
TOKEN_RE = re.compile(r"(token\s*[=:]\s*)([^\s,;]+)", re.IGNORECASE)
CAMERA_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,63}$")


def validate_camera_id(camera_id: str) -> str:
    value = str(camera_id)
    if not CAMERA_ID_RE.fullmatch(value):
        raise ValueError("Invalid camera id")
    return value


def validate_base_url(url: str) -> str:
    value = str(url)
    if not value or any(ch.isspace() for ch in value):
        raise ValueError("Invalid base URL")

    parts: SplitResult = urlsplit(value)
    if not parts.scheme:
        raise ValueError("Invalid base URL")
    if not parts.hostname:
        raise ValueError("Invalid base URL")
    if parts.query or parts.fragment:
        raise ValueError("Invalid base URL")

    try:
        _ = parts.port
    except ValueError as exc:
        raise ValueError("Invalid base URL") from exc

    return value


def redact_secrets(text: str) -> str:
    text = STREAM_PASSWORD_RE.sub(r"\1***\3", text)
    text = PASSWORD_PAIR_RE.sub(r"\1***", text)
    text = TOKEN_RE.sub(r"\1***", text)
    return text
