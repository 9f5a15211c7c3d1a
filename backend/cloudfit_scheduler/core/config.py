"""Application configuration utilities."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    APP_NAME: str = "cloudfit-scheduler"
    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "cloudfit-scheduler"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        SEED_DEMO_DATA=os.getenv("SEED_DEMO_DATA", "").strip().lower() in _TRUTHY,
    )


settings = get_settings()
