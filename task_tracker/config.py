"""Application settings loaded from environment variables (+ optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASK_TRACKER"

load_dotenv(override=False)


def _env(suffix: str, default: str) -> str:
    value = os.getenv(f"{ENV_PREFIX}_{suffix}")
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_int(suffix: str, default: int) -> int:
    try:
        return int(_env(suffix, str(default)))
    except ValueError:
        return default


def _env_float(suffix: str, default: float) -> float:
    try:
        return float(_env(suffix, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration shared by the API server and the client."""

    database_path: Path
    identity_header: str
    log_level: str
    host: str
    port: int
    api_url: str
    user_id: str
    timeout: float

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            database_path=Path(_env("DB_PATH", "tasks.db")).expanduser(),
            identity_header=_env("IDENTITY_HEADER", "X-User-Id"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            host=_env("HOST", "127.0.0.1"),
            port=_env_int("PORT", 8000),
            api_url=_env("API_URL", "http://127.0.0.1:8000"),
            user_id=_env("USER_ID", ""),
            timeout=_env_float("TIMEOUT", 10.0),
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings."""
    return Settings.from_env()
