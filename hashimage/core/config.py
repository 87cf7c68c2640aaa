# File: hashimage/core/config.py
"""
Library Configuration
"""
from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HASHIMAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING"
    )

    # OpenCV
    OPENCV_NUM_THREADS: int | None = Field(
        default=None,
        description="If None -> keep OpenCV default; 1 is best when embedded",
    )

    # Hashing
    MAX_HASH_SIZE: int = Field(
        default=1024, ge=1, description="Largest accepted hash side length"
    )
    ZERO_FILL_TAIL: bool = Field(
        default=True,
        description="Zero destination bytes/bits the bit-vector does not cover",
    )

    # Profiling
    PROFILE: bool = Field(default=False)
    PROFILE_JSON_LOG: bool = Field(default=False)


settings = Settings()
