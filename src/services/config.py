"""Application configuration loaded from environment variables and .env file.

Priority (highest to lowest):
1. Environment variables (BACKEND_URL, BACKEND_TOKEN, DATABASE_URL, etc.)
2. .env file in project root
3. Default values
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Admin console settings."""

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # REST backend
    backend_url: str = Field(
        default="http://localhost:1000", description="Base URL of the condominium REST backend"
    )
    backend_token: str | None = Field(
        default=None, description="Bearer token (takes precedence over token_file)"
    )
    token_file: str = Field(default=".token", description="Local file holding the bearer token")
    request_timeout_seconds: float = Field(default=10.0, description="Backend request timeout")

    # Local draft store (gas readings, slip settings)
    database_url: str = Field(
        default="sqlite:///./matisse_admin.db", description="SQLAlchemy URL for local drafts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file")

    # Notifications
    notification_ttl_seconds: float = Field(
        default=5.0, description="Seconds before a notification is dismissed"
    )

    # API
    api_title: str = Field(default="Matisse Admin", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


class TokenStore:
    """Local string store for the backend bearer token.

    The token from settings wins; otherwise the token file is read on every
    call so a token written by another process is picked up without restart.
    """

    def __init__(self, token: str | None = None, token_file: str | Path = ".token"):
        self._token = token.strip() if token else None
        self.path = Path(token_file)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenStore":
        return cls(token=settings.backend_token, token_file=settings.token_file)

    def get(self) -> str | None:
        """Return the stored token, or None when nothing is stored."""
        if self._token:
            return self._token
        if not self.path.exists():
            return None
        try:
            value = self.path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.warning("Cannot read token file %s: %s", self.path, e)
            return None
        return value or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token.strip(), encoding="utf-8")

    def clear(self) -> None:
        self._token = None
        if self.path.exists():
            self.path.unlink()


__all__ = ["Settings", "TokenStore", "get_settings"]
