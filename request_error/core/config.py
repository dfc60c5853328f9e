from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Notes:
      - CORS_ORIGINS accepts a comma-separated list ("a,b,c") or "*".
      - EXPOSE_DETAILS=false renders error details as null in responses.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---- Runtime ----
    LOG_LEVEL: str = Field(default="INFO")

    # ---- Error rendering ----
    EXPOSE_DETAILS: bool = Field(default=True, description="Include error details in responses")
    LOG_CLIENT_ERRORS: bool = Field(default=True, description="Log 4xx errors at INFO")

    # ---- Security ----
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None or v == "":
            return ["*"]
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s == "*":
                return ["*"]
            return [o.strip() for o in s.split(",") if o.strip()]
        return ["*"]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unknown LOG_LEVEL: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
