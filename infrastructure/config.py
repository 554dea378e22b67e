"""Application settings read from the environment"""
import os
from functools import lru_cache

from pydantic import BaseModel


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    app_title: str = "Creek River Campsite Reservations API"
    log_level: str = "INFO"
    seed_on_startup: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings(
        app_title=os.getenv("CREEK_RIVER_APP_TITLE", Settings.model_fields["app_title"].default),
        log_level=os.getenv("CREEK_RIVER_LOG_LEVEL", "INFO").upper(),
        seed_on_startup=_env_flag("CREEK_RIVER_SEED_ON_STARTUP", "true"),
    )
