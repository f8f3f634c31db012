"""Blog API settings.

Every field can be overridden from the environment (or a ``.env`` file) by its
upper-cased name, e.g. ``CASSANDRA_HOSTS='["db1","db2"]'`` or
``COMMENT_REPORT_THRESHOLD=3``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEV_SECRET_KEY = "dev-jwt-secret-key-change-in-production-32chars!"

Environment = Literal["development", "staging", "production", "testing"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Service
    # ==========================================================================

    app_name: str = "informative-blog"
    app_version: str = "0.1.0"
    environment: Environment = "development"

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = Field(default=1, ge=1)
    api_reload: bool = Field(default=True, description="Auto-reload (forces 1 worker)")

    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]
    cors_max_age: int = 600

    # ==========================================================================
    # Accounts
    # ==========================================================================

    auth_secret_key: str = Field(default=DEV_SECRET_KEY, min_length=32)
    auth_algorithm: str = "HS256"
    auth_access_token_expire_minutes: int = Field(default=60 * 24 * 7, ge=1)

    # ==========================================================================
    # Storage
    # ==========================================================================

    cassandra_hosts: list[str] = ["localhost"]
    cassandra_port: int = 9042
    cassandra_keyspace: str = "blog"
    cassandra_username: str | None = None
    cassandra_password: str | None = None
    cassandra_protocol_version: int = 4
    cassandra_connect_timeout: float = 10.0
    cassandra_request_timeout: float = 10.0

    # Redis only backs comment rate limiting; the API runs without it
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 10
    redis_socket_timeout: float = 5.0
    redis_socket_connect_timeout: float = 5.0
    redis_retry_on_timeout: bool = True
    redis_health_check_interval: int = 30

    # ==========================================================================
    # Logging
    # ==========================================================================

    log_level: LogLevel = "DEBUG"
    log_format: Literal["json", "console"] = "console"
    log_include_caller_info: bool = True
    log_dir: str = Field(default="logs", description="Rotating JSON log files go here")
    log_file_max_bytes: int = 10 * 1024 * 1024
    log_file_backup_count: int = 5
    log_requests: bool = True
    log_exclude_paths: list[str] = ["/health"]

    # ==========================================================================
    # Blog
    # ==========================================================================

    site_base_url: str = Field(
        default="http://localhost:3000",
        description="Public site URL used in sitemap and suggestion links",
    )
    comment_max_length: int = Field(default=1000, ge=1)
    comment_report_threshold: int = Field(
        default=5, ge=1, description="Reports needed to hide a comment"
    )
    comment_report_dedup: bool = Field(
        default=False,
        description="Count at most one report per account and comment",
    )

    @model_validator(mode="after")
    def _require_real_secret(self) -> "Settings":
        if self.environment == "production" and self.auth_secret_key == DEV_SECRET_KEY:
            msg = "AUTH_SECRET_KEY must be set in production"
            raise ValueError(msg)
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
