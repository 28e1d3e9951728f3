"""
Runtime configuration for CertPath.

Settings come from environment variables, optionally loaded from a .env
file in the working directory:

    CERTPATH_CONTENT_DIR   directory of course files (.yaml/.yml/.json)
    CERTPATH_PROGRESS_DB   SQLite file holding trainee lesson state
    CERTPATH_LOG_LEVEL     logging level name for scripts (default INFO)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator


DEFAULT_DATA_DIR = Path.home() / ".certpath"
DEFAULT_CONTENT_DIR = DEFAULT_DATA_DIR / "courses"
DEFAULT_PROGRESS_DB = DEFAULT_DATA_DIR / "progress.db"

ENV_PREFIX = "CERTPATH_"


class Settings(BaseModel):
    content_dir: Path = DEFAULT_CONTENT_DIR
    progress_db: Path = DEFAULT_PROGRESS_DB
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def log_level_known(cls, v):
        name = v.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {v}")
        return name


def load_settings(env_file: Optional[Path] = None, **overrides) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional .env file to load first (existing variables win)
        **overrides: Explicit values that take precedence over the environment

    Returns:
        Validated Settings
    """
    load_dotenv(dotenv_path=env_file)

    values = {}
    for field in Settings.model_fields:
        env_value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if env_value:
            values[field] = env_value
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
