# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Vendor integrations (Resend, Cloudinary, Vercel Blob) are optional at
# startup; endpoints that need them report SERVICE_NOT_CONFIGURED instead.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FROM_EMAIL = "noreply@yourdomain.com"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Resend (transactional email)
    # -------------------------------------------------------------------------

    RESEND_API_KEY: str = Field(
        default="",
        description="Resend API key"
    )

    RESEND_FROM_EMAIL: str = Field(
        default=DEFAULT_FROM_EMAIL,
        description="Sender address for all outgoing email"
    )

    SUPPORT_EMAIL: str = Field(
        default="support@yourdomain.com",
        description="Support address quoted in rejection emails"
    )

    EMAIL_DAILY_LIMIT: int = Field(
        default=100,
        ge=1,
        description="Emails allowed per day by this process"
    )

    EMAIL_MONTHLY_LIMIT: int = Field(
        default=3000,
        ge=1,
        description="Emails allowed per calendar month by this process"
    )

    # -------------------------------------------------------------------------
    # Cloudinary (images)
    # -------------------------------------------------------------------------

    CLOUDINARY_CLOUD_NAME: str = Field(default="", description="Cloudinary cloud name")
    CLOUDINARY_API_KEY: str = Field(default="", description="Cloudinary API key")
    CLOUDINARY_API_SECRET: str = Field(default="", description="Cloudinary API secret")

    CLOUDINARY_DEFAULT_FOLDER: str = Field(
        default="talentflow-uploads",
        description="Folder used when an upload does not name one"
    )

    # -------------------------------------------------------------------------
    # Vercel Blob (documents)
    # -------------------------------------------------------------------------

    BLOB_READ_WRITE_TOKEN: str = Field(default="", description="Vercel Blob read/write token")

    BLOB_API_URL: str = Field(
        default="https://blob.vercel-storage.com",
        description="Vercel Blob REST endpoint"
    )

    # -------------------------------------------------------------------------
    # Availability reminders (cron)
    # -------------------------------------------------------------------------

    CRON_SECRET: str = Field(
        default="",
        description="Bearer secret required by the HTTP cron endpoint (empty disables the check)"
    )

    AVAILABILITY_CRON_HOUR: int = Field(
        default=7,
        ge=0,
        le=23,
        description="UTC hour at which the reminder dispatch job runs"
    )

    AVAILABILITY_SCHEDULE_WINDOW_DAYS: int = Field(
        default=30,
        ge=1,
        le=30,
        description="How far ahead reminders can be handed to Resend as scheduled sends"
    )

    # -------------------------------------------------------------------------
    # Geocoding
    # -------------------------------------------------------------------------

    GEOCODER_USER_AGENT: str = Field(
        default="talentflow-api",
        description="User agent sent to Nominatim"
    )

    GEOCODER_TIMEOUT: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Geocoder timeout in seconds"
    )

    # -------------------------------------------------------------------------
    # Rate Limits (per client IP)
    # -------------------------------------------------------------------------

    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=15 * 60, ge=1)
    RATE_LIMIT_EMAIL: int = Field(default=10, ge=1)
    RATE_LIMIT_IMAGE_UPLOAD: int = Field(default=20, ge=1)
    RATE_LIMIT_IMAGE_DELETE: int = Field(default=30, ge=1)
    RATE_LIMIT_CONTACT: int = Field(default=5, ge=1)

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(default="0.0.0.0", description="Host to bind the API server to")

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    SITE_NAME: str = Field(
        default="TalentFlow",
        description="Brand name used in email templates"
    )

    SITE_URL: str = Field(
        default="http://localhost:8080",
        description="Public frontend URL used to build links in emails"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:8080,http://localhost:3000,http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(default=10, ge=1, le=100)
    MAX_DOCUMENT_SIZE_MB: int = Field(default=25, ge=1, le=500)

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/jpg,image/png,image/webp,image/gif",
        description="Accepted image MIME types (comma-separated)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip().rstrip("/") for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_types_list(self) -> list[str]:
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def max_document_size_bytes(self) -> int:
        return self.MAX_DOCUMENT_SIZE_MB * 1024 * 1024

    @property
    def resend_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )

    @property
    def blob_configured(self) -> bool:
        return bool(self.BLOB_READ_WRITE_TOKEN)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
