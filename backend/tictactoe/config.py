"""Конфигурация приложения."""
import os
from functools import lru_cache

from .constants import DEFAULT_MAX_NAME_LENGTH


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "max_name_length": int(os.environ.get("MAX_NAME_LENGTH", DEFAULT_MAX_NAME_LENGTH)),
    })()
