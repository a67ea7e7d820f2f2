"""
Data models for the MDF powder coating configurator.

This module provides:
- Board configuration models (dimensions, faces, structure, drill positions)
- Price results
- The quote aggregate and the neutral submission contract
- Business Central wire models
"""

from mdf_cpq.models.configuration import (
    MdfConfiguration,
    CoatingSide,
    SurfaceStructure,
    DrillPosition,
    DimensionSet,
)
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.models.quote import (
    Quote,
    QuoteLineItem,
    QuoteTotals,
    QuoteStatus,
    calculate_line_total,
    calculate_quote_totals,
    generate_line_description,
)
from mdf_cpq.models.submission import SubmissionContract, SubmissionLine, SubmissionTotals
from mdf_cpq.models.business_central import (
    BusinessCentralItem,
    PriceRequest,
    SalesQuoteLine,
    SalesQuoteRequest,
    SalesQuoteResponse,
)

__all__ = [
    # Configuration
    "MdfConfiguration",
    "CoatingSide",
    "SurfaceStructure",
    "DrillPosition",
    "DimensionSet",
    # Pricing
    "PriceResult",
    # Quote
    "Quote",
    "QuoteLineItem",
    "QuoteTotals",
    "QuoteStatus",
    "calculate_line_total",
    "calculate_quote_totals",
    "generate_line_description",
    # Submission
    "SubmissionContract",
    "SubmissionLine",
    "SubmissionTotals",
    # Business Central
    "BusinessCentralItem",
    "PriceRequest",
    "SalesQuoteLine",
    "SalesQuoteRequest",
    "SalesQuoteResponse",
]
