"""Configuration management for the relational store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Snapshot persistence configuration."""

    backend: Literal["memory", "file"] = Field(
        default="file", description="Key-value store backend"
    )
    data_dir: Path = Field(default=Path("/data"), description="Directory for the file backend")
    snapshot_key: str = Field(
        default="helenabase_database", min_length=1, description="Key of the database snapshot"
    )
    history_key: str = Field(
        default="helenabase_query_history", min_length=1, description="Key of the query history"
    )
    history_limit: int = Field(default=50, ge=1, description="Maximum saved queries")


class EngineConfig(BaseModel):
    """Engine behaviour configuration."""

    default_schema: str = Field(default="public", min_length=1, description="Seeded schema")
    seed_defaults: bool = Field(default=True, description="Seed the default users table")
    sql_delay_seconds: float = Field(
        default=0.1, ge=0.0, le=10.0, description="Simulated round-trip delay for execute_sql"
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="REST API port")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="helenabase_db", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the relational store."""

    model_config = SettingsConfigDict(
        env_prefix="HELENABASE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists when the file backend is used."""
        if self.storage.backend == "file":
            self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
