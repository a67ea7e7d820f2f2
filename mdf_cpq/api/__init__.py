"""API module for the MDF powder coating configurator."""

from mdf_cpq.api.dependencies import (
    get_client,
    get_product_service,
    get_price_service,
    get_quote_submission_service,
    get_quote_builder,
    get_export_service,
)

__all__ = [
    "get_client",
    "get_product_service",
    "get_price_service",
    "get_quote_submission_service",
    "get_quote_builder",
    "get_export_service",
]
