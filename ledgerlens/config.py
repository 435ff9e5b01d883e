"""Configuration management using Pydantic Settings"""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    event_source_base: str = "http://localhost:8001"

    # Service
    service_name: str = "ledgerlens"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Analytics defaults
    burn_window_days: int = 30
    trend_window_days: int = 90
    safety_buffer_days: int = 7
    forecast_horizons: List[int] = [7, 30, 90]
    daily_spend_limit: Optional[float] = None


settings = Settings()
