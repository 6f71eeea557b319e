"""Client settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)


@dataclass(frozen=True)
class ClientSettings:
    # one base URL for every call, create included
    api_url: str = "http://localhost:3000"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            api_url=os.getenv("TODO_API_URL", "http://localhost:3000").rstrip("/"),
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        )
