"""
Environment-driven settings.

Values are read on demand so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os

API_PREFIX = "/api/v1"

DEFAULT_CORS_ORIGIN = "http://localhost:3000"
CORS_METHODS = ["GET", "POST", "PATCH", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization", "Accept"]


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def db_pool_min_size() -> int:
    return _env_int("DB_POOL_MIN_SIZE", 1)


def db_pool_max_size() -> int:
    return max(_env_int("DB_POOL_MAX_SIZE", 5), db_pool_min_size())


def db_command_timeout() -> int:
    return _env_int("DB_COMMAND_TIMEOUT", 30)


def cors_origin() -> str:
    return env_str("CORS_ORIGIN", DEFAULT_CORS_ORIGIN)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def log_format() -> str:
    return env_str("LOG_FORMAT", "text").lower()


def server_host() -> str:
    return env_str("HOST", "127.0.0.1")


def server_port() -> int:
    return _env_int("PORT", 8080)


def server_workers() -> int:
    return _env_int("WEB_CONCURRENCY", 4)
