"""
Runtime configuration for JobScout.

All settings come from environment variables (a local ``.env`` is loaded
first). Import the shared instance with ``get_settings()``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings."""

    # === Server ===
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # === Request defaults ===
    default_location: str = "India"
    default_max_results: int = 20
    # Only the first N merged jobs get career page / email lookups.
    enrich_limit: int = 5

    # === Browser ===
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = 30000
    results_timeout_ms: int = 10000
    enrich_timeout_ms: int = 15000

    # === Logging ===
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            cors_origins=_env_list("CORS_ORIGINS", "*"),
            default_location=os.getenv("DEFAULT_LOCATION", "India"),
            default_max_results=int(os.getenv("DEFAULT_MAX_RESULTS", "20")),
            enrich_limit=int(os.getenv("ENRICH_LIMIT", "5")),
            headless=_env_bool("HEADLESS", "true"),
            user_agent=os.getenv("USER_AGENT", DEFAULT_USER_AGENT),
            navigation_timeout_ms=int(os.getenv("NAVIGATION_TIMEOUT_MS", "30000")),
            results_timeout_ms=int(os.getenv("RESULTS_TIMEOUT_MS", "10000")),
            enrich_timeout_ms=int(os.getenv("ENRICH_TIMEOUT_MS", "15000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("LOG_DIR") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
