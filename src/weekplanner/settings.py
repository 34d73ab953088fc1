from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEEKPLANNER_", env_file=".env", extra="ignore")

    data_dir: Path = Path(".weekplanner")
    asset_base_url: str = "http://localhost:8000/"
    cache_backend: Literal["sqlite", "memory"] = "sqlite"
    request_timeout: float = 10.0
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings()
