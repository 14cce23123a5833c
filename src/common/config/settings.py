"""Application settings and environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
    DB_DATABASE: str = os.getenv("DB_NAME", "inventory_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # Stock engine settings
    STOCK_MAX_RETRIES: int = int(os.getenv("STOCK_MAX_RETRIES", "3"))
    STOCK_RETRY_BACKOFF_SECONDS: float = float(os.getenv("STOCK_RETRY_BACKOFF_SECONDS", "0.05"))
    BULK_ADJUSTMENT_REASON: str = os.getenv("BULK_ADJUSTMENT_REASON", "Bulk update via API")

    # Scheduled inventory summary
    SUMMARY_INTERVAL_MINUTES: int = int(os.getenv("SUMMARY_INTERVAL_MINUTES", "60"))

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL


settings = Settings()
