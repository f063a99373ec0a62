"""
Runtime settings, read from the environment (or a .env file) by pydantic-settings.
Field names map to upper-case variables: DATABASE_URL, JWT_SECRET_KEY, UPLOAD_DIR, ...
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from functools import lru_cache
import os


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
ENVIRONMENTS = ("development", "testing", "staging", "production")
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Realty Catalogue API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"]

    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/realty"

    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60

    # Uploaded images are stored under upload_dir and served at upload_url_prefix
    upload_dir: str = "./uploads"
    upload_url_prefix: str = "/uploads"
    max_file_size: int = 5 * 1024 * 1024
    max_images_per_property: int = 12

    clear_images_when_omitted: bool = True
    session_header: str = "x-session-id"

    # Bootstrap account for `migrate.py seed-admin`
    super_admin_name: str = "Super Admin"
    super_admin_email: str = "admin@example.com"
    super_admin_password: str = ""

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        for plain, async_scheme in ASYNC_DRIVERS.items():
            if v and v.startswith(plain):
                return async_scheme + v[len(plain):]
        return v

    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def check_secret_strength(cls, v):
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if v != DEFAULT_JWT_SECRET and len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("environment")
    @classmethod
    def check_environment(cls, v):
        if v not in ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of: {', '.join(ENVIRONMENTS)}")
        return v

    @field_validator("max_images_per_property")
    @classmethod
    def check_image_limit(cls, v):
        if v < 1:
            raise ValueError("MAX_IMAGES_PER_PROPERTY must be at least 1")
        return v

    @field_validator("upload_dir", mode="before")
    @classmethod
    def ensure_upload_dir(cls, v):
        if v:
            os.makedirs(v, exist_ok=True)
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, parsed once."""
    return Settings()


settings = get_settings()
