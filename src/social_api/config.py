"""Application configuration using Pydantic Settings."""

from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite", "+psycopg", "+aiomysql", "+asyncmy")


class StorageConfig(BaseModel):
    """Explicit configuration handed to the storage layer at construction."""

    model_config = ConfigDict(frozen=True)

    query_timeout: float = Field(default=5.0, gt=0, description="Per-operation budget in seconds")
    invitation_ttl: timedelta = Field(
        default=timedelta(days=3), description="Lifetime of an activation invitation"
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Social API"
    debug: bool = False
    frontend_url: str = "http://localhost:5173"

    # Database
    database_url: str = "sqlite+aiosqlite:///./social.db"
    db_pool_size: int = 30
    db_max_overflow: int = 0
    db_pool_timeout: float = 5.0
    db_pool_recycle: int = 900  # seconds, 15 minutes idle
    auto_create_schema: bool = False

    # Storage
    query_timeout_seconds: float = 5.0
    invitation_ttl_hours: int = 72

    # Mail (SendGrid)
    sendgrid_api_key: str = ""
    sendgrid_base_url: str = "https://api.sendgrid.com/v3"
    mail_from_email: str = "noreply@example.com"
    mail_from_name: str = "Social"
    mail_max_retries: int = 3
    mail_sandbox: bool = False

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate that the database URL names an async driver."""
        scheme = v.split("://", 1)[0]
        if not any(scheme.endswith(driver) for driver in ASYNC_DRIVERS):
            msg = "DATABASE_URL must use an async driver (e.g. postgresql+asyncpg)"
            raise ValueError(msg)
        return v

    @field_validator("query_timeout_seconds")
    @classmethod
    def validate_query_timeout(cls, v: float) -> float:
        """Validate that every store operation has a positive budget."""
        if v <= 0:
            raise ValueError("QUERY_TIMEOUT_SECONDS must be positive")
        return v

    def storage_config(self) -> StorageConfig:
        """Build the storage configuration from these settings."""
        return StorageConfig(
            query_timeout=self.query_timeout_seconds,
            invitation_ttl=timedelta(hours=self.invitation_ttl_hours),
        )

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if not self.sendgrid_api_key:
            warnings.append("SENDGRID_API_KEY is not set - invitation emails will not be sent")

        if "example.com" in self.mail_from_email:
            warnings.append(
                "MAIL_FROM_EMAIL contains example domain - "
                "please update with your actual sender address"
            )

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
