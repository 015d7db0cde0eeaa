"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Static application settings loaded from environment variables.

    Identity provider configuration is NOT read from here: it lives in the
    mutable settings store (``application_settings`` table) so providers can
    be enabled or disabled without a restart.
    """

    # Application
    APP_NAME: str = "Signon"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # Externally visible base URL, used to build the OIDC redirect_uri
    APP_BASE_URL: str = "http://localhost:8000"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./signon.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10

    # Security
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 12 * 60
    AUTH_STATE_EXPIRE_MINUTES: int = 10

    # Cookies
    SESSION_COOKIE_NAME: str = "_signon_session"
    ACCESS_TOKEN_COOKIE_NAME: str = "_signon_session_access_token"
    AUTH_STATE_COOKIE_NAME: str = "_signon_oidc_state"
    FLASH_COOKIE_NAME: str = "_signon_flash"

    # Post-authentication destinations
    LOGIN_PATH: str = "/login"
    POST_LOGIN_PATH: str = "/my/page"
    FIRST_LOGIN_PATH: str = "/my/first_login"

    # OpenID Connect
    OIDC_HTTP_TIMEOUT_SECONDS: float = 10.0
    # Default for the runtime ``store_access_token_in_cookie`` setting
    OIDC_STORE_ACCESS_TOKEN_IN_COOKIE: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Monitoring
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # 'text' or 'json' (json for production)

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate SECRET_KEY is not using insecure defaults in production."""
        insecure_defaults = [
            "dev-secret-key-change-in-production",
            "your-secret-key-here",
            "change-me",
            "secret",
        ]

        # Read ENVIRONMENT directly; Settings is not fully initialized yet
        import os

        environment = os.getenv("ENVIRONMENT", "development")

        if environment == "production" and (v in insecure_defaults or len(v) < 32):
            raise ValueError(
                "Insecure SECRET_KEY detected in production! "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("APP_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
