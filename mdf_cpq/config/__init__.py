"""Configuration module for the MDF powder coating configurator."""

from .settings import (
    BusinessCentralSettings,
    ExportSettings,
    PricingSettings,
    Settings,
    get_settings,
    settings,
)

__all__ = [
    "BusinessCentralSettings",
    "ExportSettings",
    "PricingSettings",
    "Settings",
    "get_settings",
    "settings",
]
