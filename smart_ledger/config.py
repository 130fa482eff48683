"""Configuration management using Pydantic Settings"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./smart_ledger.db"

    # Remote document store (sync disabled when unset)
    document_store_url: Optional[str] = None

    # Service
    service_name: str = "smart-ledger"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    sync_max_retries: int = 5
    sync_backoff_base: float = 1.0  # Exponential backoff base in seconds

    # Forecasting
    reminder_window_days: int = 7
    forecast_periods: int = 8
    forecast_period_days: int = 7
    safety_margin_rate: float = 0.10

    # "fixed30" keeps the 30-day month approximation, "calendar" uses real dates
    calendar_mode: Literal["fixed30", "calendar"] = "fixed30"
    # "all_time" sums every card expense ever recorded, "cycle" only the open billing cycle
    card_balance_scope: Literal["all_time", "cycle"] = "all_time"

    # Ledger
    debt_payment_category: str = "Debt"


settings = Settings()
