"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for LocalAuth happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      with the LOCALAUTH_ prefix (e.g. db_url -> LOCALAUTH_DB_URL).

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved. Used to normalize the log level and to force DEBUG logging
      when debug mode is on.

Layer rule: core/ is the kernel. This module may not import from auth/ or
storage/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("localauth.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parents[1] / 'storage' / 'localauth.db'}"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCALAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    # Any SQLAlchemy URL works; the store is one key-value table.
    db_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Normalize log_level and reject an empty db_url.

        log_level is upper-cased and must be a name the logging module knows.
        debug=true always wins and lowers the level to DEBUG.
        """
        level = self.log_level.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {self.log_level!r}.")
        if self.debug and level != "DEBUG":
            logger.debug("debug mode enabled, overriding log level %s -> DEBUG", level)
            level = "DEBUG"
        self.log_level = level
        if not self.db_url.strip():
            raise ValueError("DB_URL must not be empty.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
