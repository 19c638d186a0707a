# app/core/config.py
from typing import *

from pydantic_settings import BaseSettings



class Settings(BaseSettings):
    APP_NAME: str = "Donation Platform"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False  # development mode: error responses carry internal detail
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    MIN_PASSWORD_LENGTH: int = 6

    # Donations
    DEFAULT_PAYMENT_METHOD: str = "manual"
    ALLOCATION_TOLERANCE: float = 0.01

    # Platform config defaults (used when the singleton row is first created)
    DEFAULT_MINIMUM_DONATION: float = 1.0
    DEFAULT_CURRENCY_CODE: str = "USD"
    DEFAULT_CURRENCY_SYMBOL: str = "$"

    # Database
    DATABASE_URL: str

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
