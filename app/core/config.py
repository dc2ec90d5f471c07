from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Project
    PROJECT_NAME: str = "Smart Restaurant API"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    RESTAURANT_NAME: str = "Smart Restaurant"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int

    # Database
    DATABASE_URL: str

    # Optional settings (with defaults)
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    SUPPORT_EMAIL: str = "support@example.com"

    # QR codes printed on tables
    QR_TOKEN_SECRET: str = "qr-secret-key-change-this-in-production"
    QR_TOKEN_EXPIRE_DAYS: int = 365
    FRONTEND_URL: str = "http://localhost:4000"

    # Billing
    TAX_RATE: Decimal = Decimal("0.08")

    # Redis mirror for realtime events
    REDIS_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_CHANNEL_PREFIX: str = "restaurant"

    # Bootstrap admin account, created at startup when both are set
    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore undeclared variables


settings = Settings()
