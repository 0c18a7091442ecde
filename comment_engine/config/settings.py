"""Application settings using Pydantic Settings."""

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Local static plugin configuration, used when no remote document is stored
DEFAULT_PLUGIN_CONFIG: dict[str, Any] = {
    "enabledCollections": [],
    "badWords": True,
    "blockedAuthorProps": [],
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="comment-engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )

    # Redis (remote plugin configuration store)
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL; remote config is disabled when unset",
    )
    redis_max_connections: int = Field(default=10, description="Max Redis connections")
    redis_socket_timeout: float = Field(default=5.0, description="Redis socket timeout")
    redis_socket_connect_timeout: float = Field(
        default=5.0, description="Redis connect timeout"
    )
    config_store_namespace: str = Field(
        default="plugin:comments", description="Key prefix of the remote config store"
    )

    # Comments
    comments_model_uid: str = Field(
        default="plugin::comments.comment", description="Store uid of comments"
    )
    comments_cascade_max_depth: int = Field(
        default=64, ge=1, description="Deepest reply level a cascade may reach"
    )
    plugin: dict[str, Any] = Field(
        default_factory=lambda: {"comments": dict(DEFAULT_PLUGIN_CONFIG)},
        description="Local static plugin configuration tree (JSON)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="DEBUG", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format"
    )
    log_include_caller_info: bool = Field(
        default=True, description="Include caller info"
    )
    log_to_file: bool = Field(default=False, description="Also write JSON log files")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Max size per log file (10MB default)"
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @property
    def remote_config_enabled(self) -> bool:
        """Check if a Redis-backed plugin config store is configured."""
        return bool(self.redis_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
