"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=3000, validation_alias=AliasChoices("port", "api_port"))
    api_secret_key: str = "keyboard-cat-change-in-production"
    api_algorithm: str = "HS256"
    api_access_token_expire_minutes: int = 60

    # Dashboard login (single user)
    dashboard_username: str = "bull"
    dashboard_password: str = "board"
    auth_cookie_name: str = "jobboard_session"
    auth_cookie_secure: bool = False

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0
    redis_tls: bool = False

    # Queues
    default_queues: list[str] = ["ExampleBullMQ", "ErrorExampleBullMQ"]
    error_queue_name: str = "ErrorExampleBullMQ"

    # Worker Configuration
    start_default_worker: bool = True
    worker_queues: list[str] = ["ExampleBullMQ"]
    worker_shutdown_timeout_seconds: float = 10.0

    # Example job behaviour
    example_job_steps: int = 100
    example_job_max_step_seconds: float = 1.0
    example_job_error_rate: float = 0.005

    # Dashboard
    dashboard_page_size: int = 25

    # Observability
    otel_exporter_otlp_endpoint: str | None = None
    otel_service_name: str = "jobboard"
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    @property
    def redis_url(self) -> str:
        """Redis URL built from the individual connection settings."""
        scheme = "rediss" if self.redis_tls else "redis"
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"{scheme}://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def redis_url_masked(self) -> str:
        """Redis URL safe to write to logs."""
        if not self.redis_password:
            return self.redis_url
        return self.redis_url.replace(self.redis_password, "***", 1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
