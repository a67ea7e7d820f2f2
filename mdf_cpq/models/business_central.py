"""
Business Central API wire models.

Field names follow the Business Central v2.0 JSON schema (camelCase) via
aliases; Python code uses snake_case. Unknown upstream fields are ignored
instead of being carried around as an untyped attribute bag.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from mdf_cpq.models.configuration import MdfConfiguration

# Decimals go over the wire as JSON numbers, not strings
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class BusinessCentralModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class BusinessCentralItem(BusinessCentralModel):
    """Item (product) as returned by ``GET /items``."""
    id: str
    number: str
    description: str = ""
    display_name: str | None = None
    unit_price: JsonAmount = Decimal("0")
    currency_code: str | None = None
    unit_of_measure: str | None = None
    item_category_code: str | None = None
    item_category_description: str | None = None
    blocked: bool = False
    type: str | None = None

    @field_validator("unit_price", mode="before")
    @classmethod
    def null_price_is_zero(cls, value):
        # Business Central sends null for items without a price
        return Decimal("0") if value is None else value

    @property
    def name(self) -> str:
        return self.display_name or self.description or self.number


class PriceRequest(BusinessCentralModel):
    """Request to price a catalog item."""
    item_number: str
    quantity: int = Field(default=1, ge=1)
    variant_code: str | None = None
    unit_of_measure: str | None = None
    customer_number: str | None = None
    configuration: MdfConfiguration | None = None


class SalesQuoteLine(BusinessCentralModel):
    line_number: int
    item_number: str
    description: str
    quantity: int
    unit_price: JsonAmount
    line_amount: JsonAmount
    currency_code: str
    item_id: str | None = None
    unit_of_measure: str | None = None


class SalesQuoteRequest(BusinessCentralModel):
    """Body of ``POST /salesQuotes``."""
    customer_number: str
    currency_code: str
    sales_quote_lines: list[SalesQuoteLine]
    external_document_number: str | None = None
    requested_delivery_date: str | None = None


class SalesQuoteResponse(BusinessCentralModel):
    """Created or fetched sales quote."""
    id: str
    number: str
    status: str
    customer_number: str | None = None
    currency_code: str | None = None
    created_date_time: str | None = None
    last_modified_date_time: str | None = None
    document_date: str | None = None
