"""
Pydantic schemas for API request/response validation.

Provides data transfer objects for all API endpoints.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from mdf_cpq.config.settings import settings
from mdf_cpq.models.business_central import BusinessCentralItem, SalesQuoteResponse
from mdf_cpq.models.configuration import MdfConfiguration
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.models.quote import Quote, QuoteLineItem, QuoteStatus, QuoteTotals


# Base schemas
class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str
    code: str | None = None
    status_code: int | None = None
    details: Any = None


# Catalog schemas
class ProductResponse(BaseModel):
    """Catalog item as exposed to the configurator."""
    id: str
    number: str
    name: str
    unit_price: Decimal
    currency: str | None = None
    unit_of_measure: str | None = None
    category: str | None = None

    @classmethod
    def from_item(cls, item: BusinessCentralItem) -> "ProductResponse":
        return cls(
            id=item.id,
            number=item.number,
            name=item.name,
            unit_price=item.unit_price,
            currency=item.currency_code,
            unit_of_measure=item.unit_of_measure,
            category=item.item_category_description or item.item_category_code,
        )


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int


# Pricing schemas
class PriceCalculationRequest(BaseModel):
    """Price a configuration with the powder coating engine."""
    configuration: MdfConfiguration
    base_price_per_m2: Decimal | None = Field(default=None, gt=0)
    item_number: str | None = None


class PriceLookupRequest(BaseModel):
    """Look up an item price in Business Central."""
    item_number: str
    quantity: int = Field(default=1, ge=1)
    customer_number: str | None = None
    variant_code: str | None = None
    unit_of_measure: str | None = None


class PriceResponse(BaseModel):
    unit_price: Decimal
    total_price: Decimal
    currency: str
    item_number: str
    quantity: int
    unit_of_measure: str | None = None
    details: dict[str, Any] = {}

    @classmethod
    def from_result(cls, result: PriceResult) -> "PriceResponse":
        return cls(
            unit_price=result.unit_price,
            total_price=result.total_price,
            currency=result.currency,
            item_number=result.item_number,
            quantity=result.quantity,
            unit_of_measure=result.unit_of_measure,
            details={key: str(value) if isinstance(value, Decimal) else value
                     for key, value in result.details.items()},
        )


# Quote schemas
class QuoteLineRequest(BaseModel):
    """One configured line; priced with the engine when the quote is built."""
    configuration: MdfConfiguration
    product_id: str = Field(default_factory=lambda: settings.pricing.product_number)
    product_name: str = Field(default_factory=lambda: settings.pricing.product_name)
    base_price_per_m2: Decimal | None = Field(default=None, gt=0)


class QuoteBuildRequest(BaseModel):
    lines: list[QuoteLineRequest] = []
    currency: str | None = None


class QuoteSubmitRequest(QuoteBuildRequest):
    customer_number: str = Field(min_length=1)


class QuoteExportRequest(QuoteBuildRequest):
    customer_name: str
    customer_number: str
    customer_reference: str = ""
    # Safe in a Content-Disposition header and as a plain file name
    filename: str | None = Field(default=None, min_length=1, max_length=255, pattern=r"^[A-Za-z0-9._ -]+$")
    export_date: date | None = None


class LineItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    currency: str
    configuration: MdfConfiguration

    @classmethod
    def from_line_item(cls, item: QuoteLineItem) -> "LineItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.line_total,
            currency=item.currency,
            configuration=item.configuration,
        )


class TotalsResponse(BaseModel):
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    currency: str
    line_item_count: int

    @classmethod
    def from_totals(cls, totals: QuoteTotals) -> "TotalsResponse":
        return cls(
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            currency=totals.currency,
            line_item_count=totals.line_item_count,
        )


class QuoteResponse(BaseModel):
    id: str
    status: QuoteStatus
    line_items: list[LineItemResponse]
    totals: TotalsResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_quote(cls, quote: Quote) -> "QuoteResponse":
        return cls(
            id=quote.id,
            status=quote.status,
            line_items=[LineItemResponse.from_line_item(item) for item in quote.line_items],
            totals=TotalsResponse.from_totals(quote.totals),
            created_at=quote.created_at,
            updated_at=quote.updated_at,
        )


class SalesQuoteSummary(BaseModel):
    """Identifiers of the quote created in Business Central."""
    id: str
    number: str
    status: str | None = None

    @classmethod
    def from_response(cls, response: SalesQuoteResponse) -> "SalesQuoteSummary":
        return cls(id=response.id, number=response.number, status=response.status)


class QuoteSubmitResponse(BaseModel):
    quote: QuoteResponse
    sales_quote: SalesQuoteSummary
