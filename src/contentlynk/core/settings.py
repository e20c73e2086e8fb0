"""Application settings and configuration.

This module defines all configuration options for the ContentLynk API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLATFORM_MODES = ("BETA", "NATURAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="ContentLynk", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_url: str = Field(default="http://localhost:3000", alias="APP_URL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    admin_setup_secret: str | None = Field(default=None, alias="ADMIN_SETUP_SECRET")

    # Database configuration
    database_url: str = Field(default="sqlite:///./contentlynk.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Platform mode is fixed for the lifetime of the process
    platform_mode: str = Field(default="BETA", alias="PLATFORM_MODE")

    # Anti-gaming and upload throttling
    max_image_uploads_per_hour: int = Field(default=5, alias="MAX_IMAGE_UPLOADS_PER_HOUR")
    engagement_rate_limit_per_hour: int = Field(
        default=60,
        alias="ENGAGEMENT_RATE_LIMIT_PER_HOUR",
    )

    # E-mail delivery (Resend HTTP API)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(default="https://api.resend.com", alias="RESEND_API_URL")
    email_from: str = Field(default="hello@contentlynk.com", alias="EMAIL_FROM")
    email_timeout_seconds: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")
    email_verification_ttl_hours: int = Field(
        default=24,
        alias="EMAIL_VERIFICATION_TTL_HOURS",
    )

    # Object storage
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    aws_access_key_id: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str | None = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    aws_s3_bucket: str | None = Field(default=None, alias="AWS_S3_BUCKET")
    aws_cloudfront_url: str | None = Field(default=None, alias="AWS_CLOUDFRONT_URL")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("platform_mode", mode="before")
    @classmethod
    def _normalize_platform_mode(cls, value: object) -> str:
        mode = str(value or "").strip().upper()
        return mode if mode in PLATFORM_MODES else "BETA"

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def storage_configured(self) -> bool:
        return bool(self.aws_s3_bucket and self.aws_access_key_id)


settings = Settings()  # type: ignore[call-arg]
