"""
Runtime settings.

Values are read from environment variables prefixed with ``HOOK_SCHEDULER_``
(e.g. ``HOOK_SCHEDULER_STORE_PATH``) and from an optional ``.env`` file.
"""
import logging
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HOOK_SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_path: Path = Field(Path("jobs.json"), description="File the job definitions are persisted to")
    host: str = "0.0.0.0"
    port: int = 3000
    dispatch_timeout_seconds: float = Field(10.0, gt=0, description="Upper bound for each outbound call")
    timezone: str = Field("UTC", description="IANA timezone schedules are evaluated in")
    firing_history_limit: int = Field(20, ge=1, description="Firings kept in memory per job")
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _valid_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone, got '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}, got '{v}'")
        return level

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
