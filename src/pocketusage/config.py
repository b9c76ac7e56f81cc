"""Configuration management for pocketusage.

Changes:
  - 2026-10-15: usage_collected defaults to False (collection is opt-in).
"""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pocketusage.usage.scheduler import DEFAULT_INTERVAL, DEFAULT_SERVER_URL

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the config directory, creating if needed."""
    config_dir = Path.home() / ".pocketusage"
    config_dir.mkdir(exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.json"


class Settings(BaseSettings):
    """Usage statistics settings with env and file support."""

    model_config = SettingsConfigDict(env_prefix="POCKETUSAGE_", env_file=".env", extra="ignore")

    # Privacy
    usage_collected: bool = Field(
        default=False,
        description=(
            "Collect anonymous usage statistics. Knowing how often plugins are used "
            "helps developers prioritize bug-fixes and new features."
        ),
    )

    # Upload
    usage_server_url: str = Field(
        default=DEFAULT_SERVER_URL, description="Endpoint that receives usage reports"
    )
    upload_interval: float = Field(
        default=DEFAULT_INTERVAL, gt=0, description="Seconds between periodic uploads"
    )
    upload_timeout: float | None = Field(
        default=None, description="HTTP timeout in seconds (None = httpx default)"
    )

    def save(self) -> None:
        """Save settings to config file."""
        data = {
            "usage_collected": self.usage_collected,
            "usage_server_url": self.usage_server_url,
            "upload_interval": self.upload_interval,
            "upload_timeout": self.upload_timeout,
        }
        get_config_path().write_text(json.dumps(data, indent=2))

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from config file, falling back to env/defaults."""
        config_path = get_config_path()
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text())
                return cls(**data)
            except Exception:
                logger.warning("Ignoring unreadable config %s", config_path, exc_info=True)
        return cls()


@lru_cache
def get_settings(force_reload: bool = False) -> Settings:
    """Get cached settings instance."""
    if force_reload:
        get_settings.cache_clear()
    return Settings.load()
