"""
Application configuration.

All values can be overridden via environment variables or a .env file.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = Field(default="Backoffice API", description="Display name of the API")
    VERSION: str = Field(default="1.0.0")
    API_V1_STR: str = Field(default="/api/v1", description="Prefix for versioned routes")
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    LOG_JSON: bool = Field(default=False, description="Emit JSON logs instead of human-readable lines")

    # Owner store
    OWNER_STORE_BACKEND: Literal["memory", "sqlalchemy"] = Field(
        default="memory",
        description="Backend holding owner records: plain in-memory list or SQLAlchemy session",
    )
    DATABASE_URL: str = Field(
        default="sqlite://",
        description="SQLAlchemy URL used when OWNER_STORE_BACKEND=sqlalchemy",
    )
    SEED_DEMO_DATA: bool = Field(default=True, description="Load the four demo owners on startup")

    # Listing
    DEFAULT_PAGE_SIZE: int = Field(default=10, ge=1)
    AUDIT_DEFAULT_PAGE_SIZE: int = Field(default=25, ge=1)

    # Client used by the frontend view models
    API_BASE_URL: str = Field(default="http://localhost:8000")
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0, le=60.0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("API_BASE_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.rstrip("/")
        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(f"API_BASE_URL must start with http:// or https://, got: {value}")
        return value

    @field_validator("API_V1_STR")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("API_V1_STR must start with '/'")
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
