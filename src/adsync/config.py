from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    meta_access_token: str = ""
    sync_function_url: str = "http://localhost:54321/functions/v1/meta-ads-sync"
    sync_function_key: str = ""
    database_url: str = "sqlite:///./adsync.db"
    window_days: List[int] = [7, 14, 30, 60, 90]
    window_delay_seconds: float = 10.0
    project_delay_seconds: float = 30.0
    fetch_timeout_seconds: float = 55.0  # must stay under the platform request cap
    forward_access_token: bool = False
    sync_cron_hour: str = "*/6"
    sync_cron_minute: int = 0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("window_days")
    @classmethod
    def _check_window_days(cls, value: List[int]) -> List[int]:
        if any(days <= 0 for days in value):
            raise ValueError("window_days must all be positive")
        if len(set(value)) != len(value):
            raise ValueError("window_days must not contain duplicates")
        return value


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
