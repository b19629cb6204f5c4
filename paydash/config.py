"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    payments_api_base: str = "https://recruit.paysbypays.com/api/v1"

    # Service
    service_name: str = "payment-dashboard"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Dashboard
    trend_period_size: int = 30  # Date buckets per chart period
    top_merchant_limit: int = 5
    recent_payment_limit: int = 5

    # Listings
    list_page_size: int = 20

    # Merchant detail
    merchant_window_days: int = 30
    merchant_monthly_months: int = 6


settings = Settings()
