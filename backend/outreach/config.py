"""
Centralised application configuration.
"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "LinkedIn Outreach Manager"
    debug: bool = False

    # Storage
    database_url: str = "sqlite:///./data/outreach.db"
    storage_backend: str = "sql"  # "sql" or "memory"

    # JWT verification (tokens are issued by the auth provider)
    jwt_secret_key: str = "your-super-secret-key-change-in-production-min-32-chars"
    jwt_algorithm: str = "HS256"

    # CSV upload
    max_upload_bytes: int = 5 * 1024 * 1024

    # Extra CORS origins, comma separated
    cors_origins: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
