"""
Configuration management for the auth service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Auth service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "localhost"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Token Configuration
    JWT_SECRET: str = "change-this-secret-in-prod"
    REFRESH_JWT_SECRET: str = "change-this-refresh-secret-in-prod"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 28

    # Pagination
    PAGE_MAX_TAKE: int = 100

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")
