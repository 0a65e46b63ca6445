"""Application configuration."""

import os
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

from bakery_costing.services.costing import MarginThresholds

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    profit_margin_low: Decimal = Decimal("20.00")
    profit_margin_high: Decimal = Decimal("40.00")
    default_management_fee_percentage: Decimal = Decimal("3.00")
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_margin_thresholds(low: Decimal, high: Decimal) -> MarginThresholds:
    """Build profit margin thresholds, rejecting an inverted range."""
    if low >= high:
        raise ValueError(
            f"profit_margin_low ({low}) must be below profit_margin_high ({high})"
        )
    return MarginThresholds(low=low, high=high)
