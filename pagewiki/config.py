"""Environment-driven settings (prefix ``PAGEWIKI_``, optional ``.env`` file)."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

HOME_PAGE_NAME = "home-page"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PAGEWIKI_", env_file=".env", case_sensitive=False)

    # Storage
    content_root: Path = Path(".")
    database_file: str = "wiki.db"
    busy_timeout_seconds: float = Field(default=30.0, gt=0)

    # Pages
    home_page_name: str = HOME_PAGE_NAME
    listing_cache_minutes: float = Field(default=30.0, gt=0)

    # API
    write_rate_limit: str = "30/minute"

    # Observability
    log_level: str = "INFO"

    @property
    def database_path(self) -> Path:
        """Location of the single embedded database file."""
        return self.content_root / self.database_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
