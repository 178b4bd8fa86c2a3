"""Runtime configuration via pydantic-settings.

Reads from LOGHANDLES_* environment variables and the .env file at project root.
"""

import signal
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import Level

# Project root is 3 levels up from this file:
# src/loghandles/loghandles/config.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Settings loaded from environment / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="LOGHANDLES_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Streams ---
    base_path: Path = PROJECT_ROOT / "logs"
    default_stream_level: Level = Level.INFO
    streams: list[str] = ["app"]

    # --- Rotation ---
    rotation_signal: str = "SIGUSR2"
    ignore_prefix: str = ""

    # --- Diagnostics ---
    log_dir: Path = PROJECT_ROOT / "logs"
    log_level: Level = Level.INFO
    early_level: Level = Level.DEBUG

    # --- Demo entry point ---
    heartbeat_seconds: float = 5.0

    @field_validator("default_stream_level", "log_level", "early_level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> Level:
        return Level.parse(value)

    @field_validator("rotation_signal")
    @classmethod
    def _check_signal(cls, value: str) -> str:
        value = value.strip().upper()
        if value and value not in signal.Signals.__members__:
            raise ValueError(f"unknown signal name: {value}")
        return value

    @property
    def signum(self) -> signal.Signals | None:
        """The rotation signal, or None when OS signal delivery is disabled."""
        if not self.rotation_signal:
            return None
        return signal.Signals[self.rotation_signal]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance (created once)."""
    return Settings()
