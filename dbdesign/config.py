"""Configuration helpers for the design workflow client."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    """Centralized environment-driven configuration.

    Defaults are read when the class body executes, so tests that change the
    environment reload this module to pick up new values.
    """

    # Backend serving /api/login and /api/generate-design
    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:3000")
    api_timeout_seconds: float = field(default_factory=lambda: _float_env("API_TIMEOUT_SECONDS", 30.0))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance to avoid repeated environment reads."""

    return Settings()


settings = get_settings()
