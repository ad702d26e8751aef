"""Centralized application configuration using Pydantic Settings (v2).

A single cached `settings` instance reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The rule-based summarizer needs no configuration at all; everything here feeds
the outer layers (snapshot directory, HTTP boundary caps, the optional hosted
summarization service, and logging).
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `RECAP_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    data_dir : Path
        Directory holding the board snapshot; maps from `RECAP_DATA_DIR`.
    openai_api_key : str | None
        Key for the optional hosted summarizer. Maps from `OPENAI_API_KEY`.
    openai_model : str
        Concrete model ID used by the "summarizer" and "qa" aliases.
    selection_block_cap / project_block_cap / ask_block_cap : int
        Maximum number of blocks accepted per hosted request, by mode.
    content_char_cap : int
        Maximum total characters of sanitized block content per hosted request.
    rate_limit_max / rate_limit_window_seconds
        Sliding-window request budget per client for the hosted endpoints.
    """

    environment: EnvName = Field(default="dev", alias="RECAP_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    data_dir: Path = Field(default=Path("artifacts") / "canvas", alias="RECAP_DATA_DIR")

    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")

    selection_block_cap: int = Field(default=12, ge=1, alias="RECAP_SELECTION_BLOCK_CAP")
    project_block_cap: int = Field(default=25, ge=1, alias="RECAP_PROJECT_BLOCK_CAP")
    ask_block_cap: int = Field(default=25, ge=1, alias="RECAP_ASK_BLOCK_CAP")
    content_char_cap: int = Field(default=10_000, ge=1, alias="RECAP_CONTENT_CHAR_CAP")
    rate_limit_max: int = Field(default=10, ge=1, alias="RECAP_RATE_LIMIT_MAX")
    rate_limit_window_seconds: float = Field(
        default=300.0, gt=0, alias="RECAP_RATE_LIMIT_WINDOW_SECONDS"
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    def block_cap_for(self, mode: str) -> int:
        """Return the hosted-request block cap for ``mode`` ("selection" or "project")."""
        return self.selection_block_cap if mode == "selection" else self.project_block_cap

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests rebuild it via `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("RECAP_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "recapcanvas") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
