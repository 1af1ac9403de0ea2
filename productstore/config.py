# productstore/config.py
"""
Runtime settings for the product API.

Everything is read from environment variables once and cached, so routers
and services receive an explicit ``Settings`` value instead of looking at
``os.environ`` themselves. Call ``get_settings.cache_clear()`` after changing
the environment (tests do this).
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_DATA_DIR = "Data Source"
DEFAULT_DATA_FILE = "products.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str = "dev"
    project_name: str = "Product Manager API"
    api_version: str = "1.0.0"
    products_file: Path = Path(DEFAULT_DATA_DIR) / DEFAULT_DATA_FILE
    log_level: str = "INFO"
    log_file: Optional[str] = None
    docs_enabled: bool = True
    cors_origins: Tuple[str, ...] = ("*",)
    host: str = "127.0.0.1"
    port: int = 8085


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _origins(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ("*",)
    return tuple(o.strip() for o in value.split(",") if o.strip()) or ("*",)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    app_env = (os.getenv("APP_ENV") or "dev").lower()
    products_file = os.getenv("PRODUCTS_FILE")
    if products_file:
        path = Path(products_file)
    else:
        path = Path.cwd() / DEFAULT_DATA_DIR / DEFAULT_DATA_FILE

    return Settings(
        app_env=app_env,
        project_name=os.getenv("PROJECT_NAME", "Product Manager API"),
        api_version=os.getenv("API_VERSION", "1.0.0"),
        products_file=path,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
        docs_enabled=_bool(os.getenv("DOCS_ENABLED"), app_env == "dev"),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT"), 8085),
    )
