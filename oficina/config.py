"""
Configuration settings for the Oficina Manager.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Oficina Manager"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://oficina:oficina@db:5432/oficina"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours

    # Default administrator, created at startup when the users table is empty
    seed_admin: bool = True
    admin_username: str = "admin"
    admin_password: str = "admin123"
    admin_email: str = "admin@oficina.com.br"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # API
    api_v1_prefix: str = "/api/v1"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
