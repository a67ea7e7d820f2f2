"""
Quote aggregate models.

A quote combines priced configuration line items with deterministic
totals and a three-state lifecycle (draft, ready, submitted). All
values are frozen; the builder in ``services.quote`` derives new
quotes instead of mutating existing ones.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable

from mdf_cpq.models.configuration import MdfConfiguration
from mdf_cpq.utils.money import round2, to_decimal


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuoteStatus(str, Enum):
    """Quote lifecycle status."""
    DRAFT = "draft"
    READY = "ready"
    SUBMITTED = "submitted"


@dataclass(frozen=True)
class QuoteLineItem:
    """One priced configuration entry within a quote."""
    id: str
    product_id: str
    product_name: str
    configuration: MdfConfiguration
    quantity: int
    unit_price: Decimal
    description: str
    currency: str
    added_at: datetime = field(default_factory=utcnow)

    @property
    def line_total(self) -> Decimal:
        return calculate_line_total(self.unit_price, self.quantity)


@dataclass(frozen=True)
class QuoteTotals:
    """Summary totals for a quote."""
    subtotal: Decimal
    tax: Decimal
    currency: str
    line_item_count: int

    @property
    def total(self) -> Decimal:
        return round2(self.subtotal + self.tax)


@dataclass(frozen=True)
class Quote:
    """Aggregate root: ordered line items, totals and status."""
    id: str
    line_items: tuple[QuoteLineItem, ...]
    totals: QuoteTotals
    status: QuoteStatus
    created_at: datetime
    updated_at: datetime

    @property
    def currency(self) -> str:
        return self.totals.currency

    @property
    def is_empty(self) -> bool:
        return not self.line_items

    def find_line_item(self, line_item_id: str) -> QuoteLineItem | None:
        for item in self.line_items:
            if item.id == line_item_id:
                return item
        return None


def calculate_line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Line total is always ``round2(unit_price * quantity)``."""
    return round2(to_decimal(unit_price) * quantity)


def calculate_quote_totals(
    line_totals: Iterable[Decimal],
    currency: str,
    tax_rate: Decimal = Decimal("0"),
) -> QuoteTotals:
    """
    Calculate quote totals from line totals.

    Order: sum line totals into the subtotal, derive tax from the
    subtotal, then add both. Each step is rounded to currency precision.
    """
    line_totals = list(line_totals)
    subtotal = round2(sum(line_totals, Decimal("0")))
    tax = round2(subtotal * to_decimal(tax_rate))

    return QuoteTotals(
        subtotal=subtotal,
        tax=tax,
        currency=currency,
        line_item_count=len(line_totals),
    )


def format_coating_sides(configuration: MdfConfiguration) -> str:
    if not configuration.coating_sides:
        return "No sides"
    return ", ".join(side.value.capitalize() for side in configuration.coating_sides)


def generate_line_description(product_name: str, configuration: MdfConfiguration) -> str:
    """
    Human-readable line description.

    Example: ``MDF Powder Coating - 1000×500×18mm - Top, Bottom - Qty: 5``
    """
    dimensions = f"{configuration.length_mm}×{configuration.width_mm}×{configuration.height_mm}mm"
    sides = format_coating_sides(configuration)

    structure_part = ""
    if configuration.structure:
        structure_part = f" - Structure: {configuration.structure.value.capitalize()}"

    return f"{product_name} - {dimensions} - {sides}{structure_part} - Qty: {configuration.quantity}"
