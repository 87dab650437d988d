"""
Configuration settings for the Car Rental Storefront.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings
from typing import List


DEFAULT_SECRET_KEY = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Car Rental Storefront"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001
    production: bool = False

    # Database Configuration
    database_url: str = "sqlite+aiosqlite:///./rental.db"
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 10

    # Security Configuration (JWT)
    secret_key: str = DEFAULT_SECRET_KEY
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    remember_token_expire_days: int = 30
    session_cookie_name: str = "token"

    # Uploaded images
    media_root: str = "public"
    image_url_prefix: str = "/image/cars"
    max_upload_bytes: int = 50 * 1024 * 1024

    # CORS
    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
