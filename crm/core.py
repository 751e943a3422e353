"""Application configuration and settings management.

This module defines the application settings loaded from environment
variables and provides a helper for accessing the cached settings.
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Attributes:
        DATABASE_URL: Database connection string.
        SECRET_KEY: Secret key used for JWT signing.
        ALGORITHM: Algorithm used to encode JWT tokens.
        ACCESS_TOKEN_EXPIRE_MINUTES: Access token lifetime in minutes.
        BCRYPT_ROUNDS: Work factor used when hashing passwords.
        ALLOWED_ORIGINS: Allowed origins for CORS.
        API_PREFIX: Path prefix shared by every API route.
        LOG_LEVEL: Root logging level.
        EXPOSE_ERROR_DETAILS: Include raw storage errors in 500 responses.
        HOST: Interface the development server binds to.
        PORT: Port the development server listens on.
    """

    DATABASE_URL: str = "sqlite:///./crm.db"
    SECRET_KEY: str = "dev-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 10
    ALLOWED_ORIGINS: List[str] = ["*"]
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    EXPOSE_ERROR_DETAILS: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    model_config = SettingsConfigDict(env_file=".env", extra="allow")


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The settings object is cached to prevent reloading environment
    variables multiple times during application lifetime.
    """

    return Settings()
