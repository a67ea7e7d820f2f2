"""
Quote Services.

Provides functionality for:
- Quote assembly (line items, totals, status lifecycle)
- Reduction to the neutral submission contract
- Ardis XML export for the manufacturing floor
"""

from mdf_cpq.services.quote.errors import (
    QuoteError,
    CurrencyMismatchError,
    InvalidQuantityError,
    EmptyQuoteError,
    QuoteAlreadySubmittedError,
    LineItemNotFoundError,
    EmptyQuoteExportError,
)
from mdf_cpq.services.quote.quote_builder import QuoteBuilder, generate_line_item_id
from mdf_cpq.services.quote.submission_mapper import prepare_for_submission
from mdf_cpq.services.quote.ardis_export import (
    ArdisExportService,
    ArdisHeader,
    CustomerInfo,
    default_header,
    escape_xml,
    format_export_date,
    line_descriptor,
    to_bytes,
)

__all__ = [
    # Errors
    "QuoteError",
    "CurrencyMismatchError",
    "InvalidQuantityError",
    "EmptyQuoteError",
    "QuoteAlreadySubmittedError",
    "LineItemNotFoundError",
    "EmptyQuoteExportError",
    # Assembly
    "QuoteBuilder",
    "generate_line_item_id",
    "prepare_for_submission",
    # Export
    "ArdisExportService",
    "ArdisHeader",
    "CustomerInfo",
    "default_header",
    "escape_xml",
    "format_export_date",
    "line_descriptor",
    "to_bytes",
]
