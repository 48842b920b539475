from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console

    # Failure reports
    REPORT_COLORS: bool = True
    REPORT_SINK: Literal["stderr", "log"] = "stderr"
    CAPTURE_LOCATIONS: bool = True  # False skips call-site introspection

    model_config = SettingsConfigDict(env_prefix="PRSE_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
