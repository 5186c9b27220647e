"""
PVSync - Configuration
All settings loaded from environment variables (or .env for local runs)
"""

import logging
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from pvsync.core.exceptions import ConfigError
from pvsync.models.tracker import Tracker

# PVOutput accepts at most 30 statuses per addbatchstatus request
MAX_BATCH_SIZE = 30

DEFAULT_TRACKERS = [
    Tracker(device_id=2, tracker_id=1, system_id="92309"),
    Tracker(device_id=2, tracker_id=2, system_id="92748"),
    Tracker(device_id=3, tracker_id=1, system_id="92869"),
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # PVOutput
    pvoutput_api_key: str = ""
    pvoutput_api_key_file: Path | None = None
    pvoutput_url: str = "https://pvoutput.org/service/r2/addbatchstatus.jsp"
    pvoutput_timeout: float = 30.0  # seconds

    # Trackers, processed in this order
    trackers: list[Tracker] = Field(default_factory=lambda: list(DEFAULT_TRACKERS))

    # Timezone used for the date/time fields sent to PVOutput
    pvoutput_tz: str = "Europe/Amsterdam"

    # Sync policy
    batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    commit_on_http_error: bool = False

    log_level: str = "INFO"

    @field_validator("trackers")
    @classmethod
    def _unique_trackers(cls, trackers: list[Tracker]) -> list[Tracker]:
        seen = set()
        for tracker in trackers:
            if tracker.key in seen:
                raise ValueError(f"duplicate tracker {tracker.key}")
            seen.add(tracker.key)
        return trackers

    @field_validator("pvoutput_tz")
    @classmethod
    def _known_timezone(cls, tz: str) -> str:
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {tz}") from e
        return tz

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, level: str) -> str:
        level = level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {level}")
        return level

    def api_key(self) -> str:
        """Resolve the PVOutput API key (env value first, then key file)."""
        if self.pvoutput_api_key.strip():
            return self.pvoutput_api_key.strip()

        if self.pvoutput_api_key_file is not None:
            try:
                key = self.pvoutput_api_key_file.read_text(encoding="utf-8").strip()
            except OSError as e:
                raise ConfigError(f"Cannot read API key file {self.pvoutput_api_key_file}: {e}") from e
            if key:
                return key

        raise ConfigError("PVOutput API key is not configured (set PVOUTPUT_API_KEY or PVOUTPUT_API_KEY_FILE)")

    class Config:
        env_file = ".env"  # Fallback for local development
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
