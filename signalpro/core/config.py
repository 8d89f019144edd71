"""
Application Configuration

All settings loaded from environment variables (prefix SIGNALPRO_).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNALPRO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SignalPro Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Decision ledger
    history_capacity: int = 1000
    evaluation_threshold_pct: float = 0.1
    default_horizon_minutes: int = 5

    # Rolling metrics
    metrics_window_size: int = 50

    # Analysis defaults
    default_trading_mode: str = "balanced"
    divergence_detection: bool = False
    trend_filter: bool = False

    # Strategy insights
    insights_min_sample: int = 10
    insights_good_accuracy: float = 60.0
    insights_poor_accuracy: float = 40.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
