from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    REDIS_URL: Optional[str] = None
    PRICE_CACHE_TTL: int = 60   # 60 seconds

    # JSON rate table loaded at startup, built-in defaults when unset
    RATE_TABLE_PATH: Optional[str] = None

    API_TITLE: str = "Moving Quote Pricing Service"
    API_DESCRIPTION: str = "Prices moving-service bookings with itemised surcharges, discounts and VAT"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
