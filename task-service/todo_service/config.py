"""Service settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)

STORE_BACKENDS = ("redis", "memory")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0
    store_backend: str = "redis"
    host: str = "0.0.0.0"
    port: int = 3000
    frontend_origin: str = "http://localhost:5500"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.getenv("STORE_BACKEND", "redis").strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {backend!r}")
        return cls(
            redis_host=os.getenv("REDIS_HOST", "redis"),
            redis_port=_env_int("REDIS_PORT", 6379),
            redis_db=_env_int("REDIS_DB", 0),
            store_backend=backend,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3000),
            frontend_origin=os.getenv("FRONTEND_ORIGIN", "http://localhost:5500"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
