from decimal import Decimal
from typing import Tuple
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite+aiosqlite:///./splitledger.db"
    DB_ECHO: bool = False

    JWT_SECRET: str = "change-me"
    JWT_ALGO: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = 30

    DEFAULT_CURRENCY: str = "INR"
    SUPPORTED_CURRENCIES: Tuple[str, str] = ("INR", "USD")
    CURRENCY_LOCALE: str = "en_US"

    # optimistic read-modify-write attempts before giving up
    CONFLICT_RETRIES: int = 5
    SETTLED_EPSILON: Decimal = Decimal("0.01")

    LOG_LEVEL: str = "INFO"


settings = Settings()
