from functools import lru_cache

from pagewiki.config import get_settings
from pagewiki.services.repository import PageRepository


@lru_cache
def get_repository() -> PageRepository:
    """The process-wide repository, built on first use from the current settings."""
    return PageRepository.from_settings(get_settings())
