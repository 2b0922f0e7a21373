from dataclasses import dataclass
from pydantic import Field, field_validator, model_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional
import logging

logger = logging.getLogger(__name__)

MILLISECONDS_PER_DAY = 24 * 60 * 60 * 1000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    ENVIRONMENT: Literal["dev", "prod"] = Field(default="dev", description="Application environment")

    FRONTEND_URL: str = Field(default="http://localhost:5173", description="Frontend URL for CORS")
    CORS_ORIGINS: str = Field(default="", description="Comma-separated extra CORS origins")

    # Refresh token policy
    REFRESH_TOKEN_COOKIE_NAME: str = Field(default="refresh_token", description="Cookie carrying the refresh token")
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7, description="Refresh token lifetime in days")
    REFRESH_TOKEN_STORE: Literal["database", "memory"] = Field(
        default="database", description="Refresh token store backend: 'database' or 'memory'"
    )

    COOKIE_SECURE: bool = Field(default=True, description="Secure flag for cookies (HTTPS only)")
    COOKIE_SAME_SITE: Literal["lax", "strict", "none"] = Field(default="strict", description="SameSite policy for cookies")
    COOKIE_HTTP_ONLY: bool = Field(default=True, description="HttpOnly flag for cookies")
    COOKIE_PATH: str = Field(default="/", description="Path attribute for cookies")
    COOKIE_DOMAIN: Optional[str] = Field(default=None, description="Domain attribute for cookies")

    # Database Configuration
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="sessions_db", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")
    DATABASE_URL: Optional[str] = Field(default=None, description="Full database URL (overrides individual DB_* settings)")
    DB_POOL_SIZE: int = Field(default=5, description="Database connection pool size")
    DB_ECHO: bool = Field(default=False, description="Enable SQL query logging")
    DB_CREATE_TABLES: bool = Field(default=False, description="Create tables on startup instead of relying on migrations")

    @computed_field
    @property
    def database_url_computed(self) -> str:
        """
        Compute the database URL from individual settings or use DATABASE_URL if provided.

        SQLite URLs are passed through untouched so local runs can use aiosqlite.

        Returns:
            str: Async SQLAlchemy connection URL
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            if url.startswith("sqlite"):
                return url
            # Ensure asyncpg driver is used
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            elif not url.startswith("postgresql+asyncpg://"):
                url = f"postgresql+asyncpg://{url}"
            return url

        # Build URL from individual settings
        return f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def cors_origins(self) -> list[str]:
        extra = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return [self.FRONTEND_URL, *extra]

    @field_validator("REFRESH_TOKEN_EXPIRE_DAYS")
    @classmethod
    def validate_token_expiration(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Refresh token expiration must be at least 1 day")
        return v

    @model_validator(mode="after")
    def set_environment_defaults(self):
        """Set environment-specific defaults and validations."""
        if self.ENVIRONMENT == "prod":
            if not self.COOKIE_SECURE:
                raise ValueError("COOKIE_SECURE must be enabled in production")

        # Less strict cookie settings in dev for local development over plain HTTP
        if self.ENVIRONMENT == "dev" and self.COOKIE_SECURE and self.COOKIE_SAME_SITE != "none":
            self.COOKIE_SECURE = False

        if self.COOKIE_SAME_SITE == "none" and not self.COOKIE_SECURE:
            raise ValueError("COOKIE_SAME_SITE=none requires COOKIE_SECURE=true")

        return self


@dataclass(frozen=True)
class RefreshTokenConfig:
    """Refresh token policy shared by the token service and the cookie issuer."""

    cookie_name: str = "refresh_token"
    ttl_ms: int = 7 * MILLISECONDS_PER_DAY
    http_only: bool = True
    secure: bool = True
    same_site: str = "strict"
    path: str = "/"
    domain: str | None = None

    def __post_init__(self) -> None:
        if self.ttl_ms <= 0:
            raise ValueError("Refresh token TTL must be positive")
        if not self.cookie_name:
            raise ValueError("Refresh token cookie name must not be empty")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RefreshTokenConfig":
        return cls(
            cookie_name=settings.REFRESH_TOKEN_COOKIE_NAME,
            ttl_ms=settings.REFRESH_TOKEN_EXPIRE_DAYS * MILLISECONDS_PER_DAY,
            http_only=settings.COOKIE_HTTP_ONLY,
            secure=settings.COOKIE_SECURE,
            same_site=settings.COOKIE_SAME_SITE,
            path=settings.COOKIE_PATH,
            domain=settings.COOKIE_DOMAIN,
        )


settings = Settings()
logger.debug(f"Settings loaded for environment: {settings.ENVIRONMENT}")
