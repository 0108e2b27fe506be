"""Configuration management for the stamp tour service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings using environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="STAMP_TOUR_")

    # Core service
    environment: str = Field("development", description="Deployment environment name")
    log_level: str = Field("INFO", description="Python logging level")
    log_file: Optional[Path] = Field(None, description="Optional rotating log file")

    # Binding
    host: str = Field("127.0.0.1", description="Address the HTTP server binds to")
    port: int = Field(80, ge=1, le=65535, description="Port the HTTP server binds to")
    protocol: str = Field("http", description="Protocol advertised in the startup banner")

    # Resources & storage
    resources_dir: Path = Field(Path("./resources"), description="Root of html/api/static resources")
    catalog_path: Optional[Path] = Field(None, description="Checkpoint catalog JSON, defaults to <resources>/api/stampList.json")
    data_dir: Path = Field(Path("./data"), description="Snapshot directory, never served as static content")

    # Sessions
    session_cookie: str = Field("user_id", description="Cookie carrying the session identifier")

    # Consistency
    serialize_operations: bool = Field(
        False, description="Run redeem and snapshots under one coordinating lock instead of per-store locks only"
    )

    # Monitoring
    enable_metrics: bool = Field(True, description="Whether to expose Prometheus metrics")

    @field_validator("protocol")
    @classmethod
    def _normalize_protocol(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def resolved_catalog_path(self) -> Path:
        return self.catalog_path or self.resources_dir / "api" / "stampList.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings


__all__ = ["Settings", "get_settings"]
