# app/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "payment-event-pipeline"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Database ---
    database_url: str = "postgresql+asyncpg://localhost:5432/payments"

    # --- Redis ---
    redis_url: str = "redis://localhost:6379/0"

    # --- Webhook secrets (unset = endpoint answers 500 "not configured") ---
    stripe_webhook_secret: Optional[str] = None
    stripe_webhook_secret_thin: Optional[str] = None
    mollie_webhook_secret: Optional[str] = None
    signature_tolerance_seconds: int = Field(300, ge=0)

    # --- Provider APIs (thin event re-fetch) ---
    provider_api_base_url_stripe: str = "https://api.stripe.com"
    provider_api_base_url_mollie: str = "https://api.mollie.com"
    stripe_api_key: Optional[str] = None
    mollie_api_key: Optional[str] = None
    provider_api_timeout_seconds: float = 10.0

    # --- Worker ---
    max_retries: int = Field(3, ge=0)
    dispatch_timeout_seconds: float = Field(30.0, gt=0)
    worker_backoff_seconds: float = Field(5.0, ge=0)
    queue_pop_timeout_seconds: int = Field(0, ge=0)

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
