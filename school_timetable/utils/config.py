"""Runtime settings loaded from environment variables.

Every setting can be overridden with a TIMETABLE_ prefixed variable, e.g.
TIMETABLE_STORE_DIR=/var/lib/timetables. The CLI loads a .env file first.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the command line and storage layer."""

    data_dir: str = Field(
        default=".",
        description="Directory holding classes.csv, subjects.csv and staff.csv",
    )
    store_dir: str = Field(
        default="data/store",
        description="Directory for the JSON timetable store",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Fixed random seed for reproducible schedules",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_prefix="TIMETABLE_",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
