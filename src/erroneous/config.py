from __future__ import annotations

from functools import lru_cache

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="ERROR")
    traceback_tail: int = Field(default=6, ge=1)
    stack_depth: int | None = Field(default=None, ge=1)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.upper()
        logger.level(v)  # raises ValueError for unknown levels
        return v

    @field_validator("stack_depth", mode="before")
    @classmethod
    def _parse_stack_depth(cls, v: int | str | None) -> int | str | None:
        if v == "":
            return None
        return v

    model_config = SettingsConfigDict(
        env_prefix="ERRONEOUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
