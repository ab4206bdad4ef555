"""
Settings for the payment gateway.
Values are read from environment variables prefixed with PAYMENT_GATEWAY_
(or a local .env file), e.g. PAYMENT_GATEWAY_BANK_BASE_URL.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYMENT_GATEWAY_",
        env_file=".env",
        extra="ignore",
    )

    # Acquiring bank (simulator) base URL; requests go to <base>/payments
    bank_base_url: str = "http://localhost:8080/"
    bank_timeout_seconds: float = 10.0

    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
