from __future__ import annotations

APP_VERSION = "0.0.2"
DEFAULT_BIND = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_ID_POLICY = "random"
DEFAULT_LOG_LEVEL = "info"
