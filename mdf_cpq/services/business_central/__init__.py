"""
Business Central Integration Services.

Typed access to the Business Central v2.0 API:

1. **API client** - authentication, deadlines, retry with backoff
2. **Error taxonomy** - every failure classified into nine kinds
3. **Domain services** - product lookup, price lookup, sales quote submission
"""

from mdf_cpq.services.business_central.client import (
    BusinessCentralClient,
    BusinessCentralConfig,
    create_client_from_settings,
)
from mdf_cpq.services.business_central.errors import (
    ApiError,
    ApiErrorKind,
    ClientConfigurationError,
    classify,
    is_retryable,
    validate_payload,
)
from mdf_cpq.services.business_central.product_service import ProductService
from mdf_cpq.services.business_central.price_service import PriceService
from mdf_cpq.services.business_central.quote_service import (
    QuoteSubmissionService,
    build_sales_quote_request,
)

__all__ = [
    "BusinessCentralClient",
    "BusinessCentralConfig",
    "create_client_from_settings",
    "ApiError",
    "ApiErrorKind",
    "ClientConfigurationError",
    "classify",
    "is_retryable",
    "validate_payload",
    "ProductService",
    "PriceService",
    "QuoteSubmissionService",
    "build_sales_quote_request",
]
