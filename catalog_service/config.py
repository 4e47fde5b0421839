"""
Configuration management for the catalog service.

Loads and validates environment variables for the application. A Settings
instance is built once at startup and handed to the components that need it.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables. JWT_SECRET_KEY
    has no default: the service refuses to start without it.
    """

    # Service Configuration
    APP_NAME: str = "Catalog Service"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8000, ge=1, le=65535)

    # JWT Configuration
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1)

    # Password Hashing
    PASSWORD_HASH_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Storage
    DATA_DIR: Path = Path("data")

    # CORS Configuration (comma-separated string)
    CORS_ORIGINS: str = "*"

    # Bootstrap admin account, created at startup when email and password are set
    ADMIN_NAME: str = "Administrator"
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("JWT_SECRET_KEY must not be blank")
        return value

    @property
    def users_file(self) -> Path:
        return self.DATA_DIR / "users.json"

    @property
    def products_file(self) -> Path:
        return self.DATA_DIR / "products.json"

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings()
