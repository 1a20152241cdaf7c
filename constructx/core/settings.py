from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(slots=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_timeout: float = 30.0
    use_mock_data: bool = False
    catalog_path: Path = CONFIG_DIR / "entities.yaml"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    """Read the service configuration from the environment."""

    catalog_env = os.getenv("CONSTRUCTX_CATALOG_PATH")
    catalog_path = Path(catalog_env).expanduser().resolve() if catalog_env else CONFIG_DIR / "entities.yaml"

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    return Settings(
        api_url=(os.getenv("CONSTRUCTX_API_URL") or DEFAULT_API_URL).rstrip("/"),
        api_timeout=_env_float("CONSTRUCTX_API_TIMEOUT", 30.0),
        use_mock_data=_env_flag("CONSTRUCTX_USE_MOCK_DATA"),
        catalog_path=catalog_path,
        log_level=(os.getenv("CONSTRUCTX_LOG_LEVEL") or "INFO").upper(),
        cors_origins=origins or list(DEFAULT_ORIGINS),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a console handler on the package logger."""

    package_logger = logging.getLogger("constructx")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
