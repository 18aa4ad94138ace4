"""
Tracker configuration using pydantic-settings.

Settings come from ``STOCKFOLIO_*`` environment variables or a ``.env`` file.
The Alpha Vantage key is also read from the conventional
``ALPHA_VANTAGE_API_KEY`` variable.
"""

import sys
from pathlib import Path

from loguru import logger
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stockfolio.core.constants import (
    ALPHA_VANTAGE_BASE_URL,
    DEFAULT_STORAGE_DIR,
    DEFAULT_STORAGE_KEY,
    QUOTE_BATCH_DELAY_SECONDS,
    QUOTE_BATCH_SIZE,
    QUOTE_CACHE_TTL_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)
from stockfolio.core.enums import GainLossConvention

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


class TrackerSettings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="STOCKFOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    alpha_vantage_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("STOCKFOLIO_ALPHA_VANTAGE_API_KEY", "ALPHA_VANTAGE_API_KEY"),
    )
    quote_base_url: str = ALPHA_VANTAGE_BASE_URL
    quote_batch_size: int = Field(default=QUOTE_BATCH_SIZE, ge=1)
    quote_batch_delay_seconds: float = Field(default=QUOTE_BATCH_DELAY_SECONDS, ge=0)
    quote_cache_ttl_seconds: float = Field(default=QUOTE_CACHE_TTL_SECONDS, gt=0)
    request_timeout_seconds: float = Field(default=REQUEST_TIMEOUT_SECONDS, gt=0)
    storage_dir: Path = Path(DEFAULT_STORAGE_DIR)
    storage_key: str = DEFAULT_STORAGE_KEY
    gain_loss_convention: GainLossConvention = GainLossConvention.ABSOLUTE
    log_level: str = "INFO"

    @field_validator("gain_loss_convention", mode="before")
    @classmethod
    def _parse_convention(cls, value: object) -> object:
        if isinstance(value, str):
            return GainLossConvention.from_string(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at ``level``, replacing existing sinks."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
