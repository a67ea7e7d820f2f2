"""
Configuration settings for the MDF powder coating configurator.

Uses pydantic-settings for environment variable management with validation.
Supports multi-environment deployments (development, staging, production).
"""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BusinessCentralSettings(BaseSettings):
    """Connection settings for the Business Central quoting API."""

    model_config = SettingsConfigDict(env_prefix="BC_")

    base_url: str | None = None
    company_id: str | None = None
    api_version: str = "v2.0"
    access_token: SecretStr | None = None
    api_key: SecretStr | None = None
    timeout_ms: int = 30_000
    enable_retry: bool = True
    max_retries: int = 3
    backoff_base_ms: int = 100


class PricingSettings(BaseSettings):
    """Powder coating price list configuration."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    base_price_per_m2: Decimal = Decimal("166")
    currency: str = "EUR"
    tax_rate: Decimal = Decimal("0")
    product_number: str = "P101(07)"
    product_name: str = "MDF Powder Coating"


class ExportSettings(BaseSettings):
    """Defaults for the Ardis manufacturing export header."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    user: str = "CPQ"
    main_model: str = "P101"
    main_material: str = "MDF PL"
    main_finish: str = "50-V"
    main_color: str = "ONBEKEND"
    # Split of the unit price into unprocessed board and finishing work.
    # A heuristic from the first Ardis integration, not a documented business rule.
    unprocessed_price_share: Decimal = Decimal("0.4")
    finishing_price_share: Decimal = Decimal("0.6")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "MDF Powder Coating Configurator"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Sub-configurations
    business_central: BusinessCentralSettings = Field(default_factory=BusinessCentralSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Clear cache with get_settings.cache_clear() if needed.
    """
    return Settings()


# Convenience export
settings = get_settings()
