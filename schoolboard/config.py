import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Schoolboard"
    app_version: str = "0.1.0"
    app_env: str = "development"

    # Backend API
    api_base_url: str = "http://localhost:8000/api/v1"
    request_timeout: float = 30.0
    cache_ttl_seconds: int = 300  # 0 disables the GET response cache

    # List views
    default_page_size: int = 10

    # Fixture data (pages without a backend listing)
    fixtures_file: str = "data/fixtures.yaml"
    fixture_latency_ms: int = 0
    fixture_api_port: int = 8010

    # Persisted session credentials
    credentials_file: str = "data/credentials.json"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_client: str = "INFO"           # backend API client and sources

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        if self.default_page_size < 1:
            _config_logger.warning(
                "default_page_size=%d is invalid, falling back to 10",
                self.default_page_size,
            )
            object.__setattr__(self, "default_page_size", 10)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
