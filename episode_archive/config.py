"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseModel):
    base_url: AnyHttpUrl = Field(
        default="http://localhost:3000",
        description="Origin serving the /api/episodes endpoint.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=120)


class PaginationSettings(BaseModel):
    first_page_limit: int = Field(default=50, ge=1, le=500)
    page_size: int = Field(default=10, ge=1, le=500)


class HighlightSettings(BaseModel):
    sanitize: bool = True
    allowed_tags: str = Field(
        default="em,mark,strong,b",
        description="Comma separated emphasis tags kept in highlight fragments.",
    )

    @field_validator("allowed_tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value):
        if isinstance(value, (list, tuple, set, frozenset)):
            value = ",".join(value)
        if isinstance(value, str):
            return ",".join(tag.strip().lower() for tag in value.split(",") if tag.strip())
        return value

    def tag_set(self) -> frozenset[str]:
        return frozenset(tag for tag in self.allowed_tags.split(",") if tag)


class ArchiveSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ARCHIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    backend: BackendSettings = Field(default_factory=BackendSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    highlights: HighlightSettings = Field(default_factory=HighlightSettings)


@lru_cache
def get_settings() -> ArchiveSettings:
    """Return cached settings instance."""

    return ArchiveSettings()


__all__ = [
    "ArchiveSettings",
    "BackendSettings",
    "HighlightSettings",
    "PaginationSettings",
    "get_settings",
]
