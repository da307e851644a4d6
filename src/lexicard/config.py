"""Application settings and logging setup.

Settings come from environment variables prefixed with ``LEXICARD_`` or a
``.env`` file in the working directory.
"""
import sys
from functools import lru_cache
from typing import Optional

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lexicard.db import DEFAULT_DB_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEXICARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: str = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    log_level: str = Field(default="WARNING", description="Minimum level for stderr logging")
    log_file: Optional[str] = Field(default=None, description="Optional rotating log file")
    language: str = Field(default="", description="Only practice cards in this language")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)
