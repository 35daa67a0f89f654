from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field(default="Product Catalog API", description="Service name")
    APP_VERSION: str = Field(default="2.0.0", description="Service version")
    CORS_ORIGINS: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./catalog.db",
        description="SQLAlchemy database URL",
    )
    DB_POOL_SIZE: int = Field(default=10, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Connections allowed beyond the pool size")
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # Business rules
    STRICT_PRODUCT_RULES: bool = Field(
        default=False,
        description="Apply catalog business rules (forbidden words, price/stock limits per category)",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
