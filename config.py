"""Environment-driven settings for the Product Search API."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

SEARCH_BACKENDS = ("walmart", "google_shopping")


def env_int(name: str, default: int, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


class Settings(BaseModel):
    search_backend: str = "walmart"
    serpapi_key: str = ""
    serpapi_gl: str = "IN"
    serpapi_hl: str = "en"
    port: int = 3000
    upstream_timeout_seconds: int = 30
    upstream_max_bytes: int = 10 * 1024 * 1024
    demo_fallback_enabled: bool = False
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        origins = [
            origin.strip()
            for origin in (os.getenv("CORS_ALLOW_ORIGINS") or "*").split(",")
            if origin.strip()
        ]
        return cls(
            search_backend=(os.getenv("SEARCH_BACKEND") or "walmart").strip().lower(),
            serpapi_key=os.getenv("SERPAPI_KEY", ""),
            serpapi_gl=os.getenv("SERPAPI_GL", "IN"),
            serpapi_hl=os.getenv("SERPAPI_HL", "en"),
            port=env_int("PORT", 3000, min_value=1, max_value=65535),
            upstream_timeout_seconds=env_int("UPSTREAM_TIMEOUT_SECONDS", 30, min_value=1, max_value=120),
            upstream_max_bytes=env_int("UPSTREAM_MAX_BYTES", 10 * 1024 * 1024, min_value=1024),
            demo_fallback_enabled=env_bool("DEMO_FALLBACK_ENABLED"),
            cors_allow_origins=origins or ["*"],
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
