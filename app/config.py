"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="DoGoods", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/dogoods",
        description="SQLAlchemy database URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(default="DoGoods API", description="API documentation title")
    api_description: str = Field(
        default="Community food-sharing marketplace: listings, claims, receipts and admin tools",
        description="API documentation description",
    )

    # Scheduled job endpoints
    service_role_key: str = Field(
        default="change-me-service-role-key",
        description="Bearer token the external cron presents to /functions endpoints",
    )

    # Receipt lifecycle
    receipt_pickup_weekday: int = Field(
        default=4, ge=0, le=6, description="Weekly pickup deadline weekday (0=Monday)"
    )
    receipt_pickup_hour: int = Field(
        default=17, ge=0, le=23, description="Weekly pickup deadline hour (UTC)"
    )
    default_reminder_hours: int = Field(
        default=24, ge=1, le=168, description="Default pickup reminder lead time"
    )
    listing_moderation_enabled: bool = Field(
        default=True, description="New listings wait for admin approval"
    )

    # Approval codes
    approval_code_start: int = Field(
        default=100001, ge=1, le=999999, description="First number for a new school prefix"
    )
    approval_code_batch_size: int = Field(
        default=100, ge=1, description="Insert batch size when generating codes"
    )

    # Twilio SMS
    twilio_account_sid: Optional[str] = Field(default=None, description="Twilio account SID")
    twilio_auth_token: Optional[str] = Field(default=None, description="Twilio auth token")
    twilio_phone_number: Optional[str] = Field(
        default=None, description="Sender phone number"
    )
    twilio_api_base: str = Field(
        default="https://api.twilio.com/2010-04-01", description="Twilio REST API base URL"
    )
    twilio_timeout_sec: float = Field(default=15.0, gt=0, description="Twilio request timeout")

    # File storage
    storage_dir: Path = Field(default=Path("uploads"), description="Local storage bucket root")
    storage_public_url: str = Field(
        default="http://localhost:8000/storage", description="Public URL prefix for stored files"
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1, description="Maximum upload size per file"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING

    def twilio_configured(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )


# Global settings instance
settings = Settings()
