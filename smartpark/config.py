# smartpark/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./smartpark.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "0.0.0.0"
    BACKEND_PORT: int = 5003

    # ── Security ──────────────────────────────────────────────────────────
    SECRET_KEY: str = "change-this-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440     # 24h
    MIN_PASSWORD_LENGTH: int = 8
    ALLOW_SELF_REGISTRATION: bool = True
    ALLOW_ADMIN_BOOTSTRAP: bool = False          # Set in .env only while seeding the first admin

    # ── Organization ──────────────────────────────────────────────────────
    ORGANIZATION_NAME: str = "Park-kizo Parking Management"
    CURRENCY: str = "RWF"
    HOURLY_RATE: int = 500                       # Fee per started hour

    # ── Reports ───────────────────────────────────────────────────────────
    REPORT_SAMPLE_LIMIT: int = 50                # Raw records echoed by the daily report
    REPORT_SIGNED_REGENERATION: str = "keep"     # keep | reset | block
    DEFAULT_SIGNER_POSITION: str = "Manager"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
