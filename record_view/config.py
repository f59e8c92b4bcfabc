"""
Configuration settings for record-view.

Uses Pydantic Settings to load environment variables (or a local `.env`) for
the default view selection policy, field-list parsing, logging, and the
benchmark command of the CLI.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Views
    default_selection: Literal["all", "none"] = Field("all", alias="RECORD_VIEW_DEFAULT_SELECTION")
    field_separator: str = Field(",", min_length=1, alias="RECORD_VIEW_FIELD_SEPARATOR")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # CLI benchmark defaults
    bench_iterations: int = Field(10_000, gt=0, alias="BENCH_ITERATIONS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
