"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = os.getenv("APP_NAME", "Shop Wallet")
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    # Any SQLAlchemy URL works: postgresql://, mysql+pymysql://, sqlite://
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./shop_wallet.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Wallet rules
    WALLET_CURRENCY: str = os.getenv("WALLET_CURRENCY", "PLN")
    MAX_DEPOSIT_AMOUNT: Decimal = Decimal(
        os.getenv("MAX_DEPOSIT_AMOUNT", "10000.00")
    )

    # Pagination
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
