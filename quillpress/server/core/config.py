"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class PostgreSQLConfig(BaseModel):
    """PostgreSQL database configuration."""

    db: str = Field(default="quillpress", alias="POSTGRES_DB", description="PostgreSQL database name")
    user: str = Field(default="quillpress", alias="POSTGRES_USER", description="PostgreSQL database user")
    password: str = Field(default="changeme", alias="POSTGRES_PASSWORD", description="PostgreSQL database password")
    host: str = Field(default="postgres", alias="POSTGRES_HOST", description="PostgreSQL database host address")
    port: int = Field(default=5432, alias="POSTGRES_PORT", description="PostgreSQL database port number")

    model_config = {"populate_by_name": True}

    @property
    def url(self) -> str:
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


class MediaConfig(BaseModel):
    """Media library storage configuration."""

    upload_dir: str = Field(
        default="uploads", alias="MEDIA_UPLOAD_DIR", description="Filesystem directory holding uploaded media"
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024, alias="MEDIA_MAX_UPLOAD_BYTES", description="Maximum accepted upload size in bytes"
    )
    allowed_mime_types: list[str] = Field(
        default=["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"],
        alias="MEDIA_ALLOWED_MIME_TYPES",
        description="MIME types accepted by the media library",
    )
    public_prefix: str = Field(
        default="/uploads", alias="MEDIA_PUBLIC_PREFIX", description="URL prefix under which uploads are served"
    )
    fetch_timeout_seconds: float = Field(
        default=10.0, alias="MEDIA_FETCH_TIMEOUT_SECONDS", description="Timeout for upload-from-URL downloads"
    )

    model_config = {"populate_by_name": True}


class SiteConfig(BaseModel):
    """Public site addressing used in feeds and public URLs."""

    site_url: str = Field(
        default="http://localhost:3000", alias="SITE_URL", description="Public frontend base URL used in feed links"
    )
    backend_url: str = Field(
        default="http://localhost:8000", alias="BACKEND_URL", description="Public backend base URL"
    )
    feed_title: str = Field(default="QuillPress Blog", alias="FEED_TITLE", description="RSS channel title")
    feed_description: str = Field(
        default="The latest updates from our blog", alias="FEED_DESCRIPTION", description="RSS channel description"
    )

    model_config = {"populate_by_name": True}


class SchedulerConfig(BaseModel):
    """Scheduled publishing loop configuration."""

    enabled: bool = Field(
        default=False, alias="SCHEDULER_ENABLED", description="Run the scheduled-publishing loop in-process"
    )
    interval_seconds: int = Field(
        default=60, alias="SCHEDULER_INTERVAL_SECONDS", description="Seconds between scheduled-publishing passes"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # QuillPress Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="QuillPress server host address to bind to",
        alias="QUILLPRESS_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="QuillPress server port number",
        alias="QUILLPRESS_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="QuillPress server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="QUILLPRESS_LOG_LEVEL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="Async database connection URL; built from POSTGRES_* when unset",
        alias="DATABASE_URL",
    )
    database_auto_create: bool = Field(
        default=False,
        description="Create missing tables on startup (development and tests only)",
        alias="DATABASE_AUTO_CREATE",
    )
    postgres_db: str = Field(default="quillpress", alias="POSTGRES_DB")
    postgres_user: str = Field(default="quillpress", alias="POSTGRES_USER")
    postgres_password: str = Field(default="changeme", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="postgres", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Media Configuration
    # =====================================================================
    media_upload_dir: str = Field(default="uploads", alias="MEDIA_UPLOAD_DIR")
    media_max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MEDIA_MAX_UPLOAD_BYTES")
    media_allowed_mime_types: list[str] = Field(
        default=["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"],
        alias="MEDIA_ALLOWED_MIME_TYPES",
    )
    media_public_prefix: str = Field(default="/uploads", alias="MEDIA_PUBLIC_PREFIX")
    media_fetch_timeout_seconds: float = Field(default=10.0, alias="MEDIA_FETCH_TIMEOUT_SECONDS")

    # =====================================================================
    # Site Configuration
    # =====================================================================
    site_url: str = Field(default="http://localhost:3000", alias="SITE_URL")
    backend_url: str = Field(default="http://localhost:8000", alias="BACKEND_URL")
    feed_title: str = Field(default="QuillPress Blog", alias="FEED_TITLE")
    feed_description: str = Field(default="The latest updates from our blog", alias="FEED_DESCRIPTION")

    # =====================================================================
    # Scheduler Configuration
    # =====================================================================
    scheduler_enabled: bool = Field(default=False, alias="SCHEDULER_ENABLED")
    scheduler_interval_seconds: int = Field(default=60, alias="SCHEDULER_INTERVAL_SECONDS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def postgres(self) -> PostgreSQLConfig:
        """Get PostgreSQL configuration from environment variables."""
        return PostgreSQLConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def media(self) -> MediaConfig:
        """Get media storage configuration from environment variables."""
        return MediaConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def site(self) -> SiteConfig:
        """Get public site configuration from environment variables."""
        return SiteConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def scheduler(self) -> SchedulerConfig:
        """Get scheduled publishing configuration from environment variables."""
        return SchedulerConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def resolved_database_url(self) -> str:
        """Database URL to connect to, falling back to the PostgreSQL settings."""
        return self.database_url or self.postgres.url


settings = Settings()
