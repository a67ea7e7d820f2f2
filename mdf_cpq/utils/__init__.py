"""
Utility modules for the configurator.

Provides shared functionality across all services:
- Logging utilities for structured logging
- Currency rounding helpers
"""

from mdf_cpq.utils.logging import (
    setup_logging,
    get_logger,
    RequestLogger,
    ServiceLogger,
    request_logger,
)
from mdf_cpq.utils.money import round2, to_decimal, format_amount

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "RequestLogger",
    "ServiceLogger",
    "request_logger",
    # Money
    "round2",
    "to_decimal",
    "format_amount",
]
