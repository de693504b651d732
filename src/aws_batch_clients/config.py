"""Configuration management for the AWS batch client layer."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

_config_logger = logging.getLogger(__name__)


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")


class AWSSettings(BaseModel):
    sts_region: str = Field(default="us-east-1")
    max_attempts: int | None = Field(
        default=None,
        ge=1,
        le=20,
        description="Total SDK attempts per call. None keeps the botocore default.",
    )


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    aws: AWSSettings = Field(default_factory=AWSSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "sts_region": "AWS_STS_REGION",
    "max_attempts": "AWS_MAX_ATTEMPTS",
}


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _env_int(key: str, default: int | None) -> int | None:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        _config_logger.warning(
            "Invalid integer value for %s: %r, using default %s", key, value, default
        )
        return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=_project_root() / ".env")

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": os.getenv(ENV_KEYS["log_file"]) or None,
        },
        "aws": {
            "sts_region": os.getenv(ENV_KEYS["sts_region"], AWSSettings().sts_region),
            "max_attempts": _env_int(ENV_KEYS["max_attempts"], AWSSettings().max_attempts),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
