from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Stock Ledger"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"

    database_url: str = "postgresql+psycopg2://stockledger:stockledger@db:5432/stockledger"
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    seed_demo_data: bool = False
    sku_prefix: str = "SKU"

    low_stock_notifications: bool = True
    telegram_bot_token: str = ""
    telegram_default_chat_id: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
