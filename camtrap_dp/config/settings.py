"""
Configuration settings for camtrap_dp scripts and source adapters.

**Conceptual**: Strongly-typed configuration objects loaded from environment
variables (via .env files). Settings are validated when loaded, so a bad value
(e.g. CAMTRAP_READ_MODE=sometimes) fails at startup rather than mid-read.

**Scope**: Settings feed the outer layers only: the HTTP source adapter and
the command-line actions. The conversion core (codecs, mapper, reader/writer)
takes every choice as an explicit argument and never reads settings itself.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


_TRUE_VALUES = ("true", "1", "yes")
READ_MODES = ("strict", "best_effort")


@dataclass(frozen=True)
class HttpSettings:
    """
    Configuration for fetching tables over HTTP(S).

    Attributes:
        timeout_seconds: Request timeout in seconds (default 30).
        user_agent: User-Agent header sent with every request.
    """
    timeout_seconds: int = 30
    user_agent: str = "camtrap_dp/1.0"

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"CAMTRAP_HTTP_TIMEOUT_SECONDS must be positive, got: {self.timeout_seconds}"
            )

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """
        Load HTTP settings from environment variables.

        **Environment variables**:
          - CAMTRAP_HTTP_TIMEOUT_SECONDS (optional): defaults to 30.
          - CAMTRAP_USER_AGENT (optional): defaults to "camtrap_dp/1.0".

        Raises:
            ValueError: If the timeout is not a positive integer.
        """
        timeout_str = os.getenv("CAMTRAP_HTTP_TIMEOUT_SECONDS", "30")
        try:
            timeout_seconds = int(timeout_str)
        except ValueError:
            raise ValueError(
                f"CAMTRAP_HTTP_TIMEOUT_SECONDS must be an integer, got: {timeout_str}"
            )

        return cls(
            timeout_seconds=timeout_seconds,
            user_agent=os.getenv("CAMTRAP_USER_AGENT", "camtrap_dp/1.0"),
        )


@dataclass(frozen=True)
class Settings:
    """
    Global settings for camtrap_dp scripts.

    Attributes:
        http: Settings for the HTTP source adapter.
        read_mode: Default read mode name for scripts, "strict" or "best_effort"
                   (camtrap_dp.data.io.ReadMode values).
        strict_columns: Whether scripts reject columns the schema does not define.
        log_level: Logging level name for scripts ("INFO", "DEBUG", ...).
    """
    http: HttpSettings = field(default_factory=HttpSettings)
    read_mode: str = "best_effort"
    strict_columns: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        **Environment variables**:
          - CAMTRAP_READ_MODE (optional): "strict" or "best_effort" (default).
          - CAMTRAP_STRICT_COLUMNS (optional): "true"/"1"/"yes" to reject unknown columns.
          - CAMTRAP_LOG_LEVEL (optional): defaults to "INFO".
          - CAMTRAP_HTTP_* (see HttpSettings.from_env).

        Raises:
            ValueError: If any variable holds an invalid value.

        Usage example:
            >>> settings = Settings.from_env()
            >>> settings.read_mode
            'best_effort'
        """
        read_mode = os.getenv("CAMTRAP_READ_MODE", "best_effort").strip().lower()
        if read_mode not in READ_MODES:
            raise ValueError(
                f"CAMTRAP_READ_MODE must be one of {list(READ_MODES)}, got: {read_mode}"
            )

        log_level = os.getenv("CAMTRAP_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"CAMTRAP_LOG_LEVEL is not a logging level: {log_level}")

        return cls(
            http=HttpSettings.from_env(),
            read_mode=read_mode,
            strict_columns=os.getenv("CAMTRAP_STRICT_COLUMNS", "false").lower() in _TRUE_VALUES,
            log_level=log_level,
        )


_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the settings loaded from the environment, loading them on first call.

    Scripts call this once at startup and pass values down explicitly. Tests
    build Settings objects directly instead.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """Clear the cached settings so the next get_settings() reloads them (for tests)."""
    global _default_settings
    _default_settings = None
