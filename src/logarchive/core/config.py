# logarchive/src/logarchive/core/config.py

from pydantic_settings import BaseSettings
from pydantic import Field

from typing import Optional
from pathlib import Path

from logarchive.core.settings import DEFAULT_RETAIN_LOGS_DAYS, DEFAULT_RETAIN_ARCHIVES_DAYS


class Settings(BaseSettings):
    # Defaults used by the CLI when a flag is omitted
    log_dir: Optional[Path] = Field(default=None)
    dest_dir: Optional[Path] = Field(default=None)
    days_logs: int = Field(default=DEFAULT_RETAIN_LOGS_DAYS, ge=0)
    days_backups: int = Field(default=DEFAULT_RETAIN_ARCHIVES_DAYS, ge=0)
    delete_originals: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Cron schedule used by `logarchive cron`
    cron_hour: int = Field(default=2, ge=0, le=23)
    cron_minute: int = Field(default=0, ge=0, le=59)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "LOGARCHIVE_",
        "extra": "ignore"
    }

    def default_menu_dir(self) -> Path:
        return self.log_dir or Path("/var/log")


# Instantiate settings
settings = Settings()
