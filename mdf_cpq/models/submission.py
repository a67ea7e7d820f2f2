"""
Quote submission contract.

Neutral shape a quote is reduced to before it is mapped onto a specific
external system's request format. Keeps quote-building logic independent
of the ERP schema.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SubmissionLine:
    line_number: int  # 1-based
    item_number: str
    description: str
    quantity: int
    unit_price: Decimal
    line_amount: Decimal
    currency_code: str


@dataclass(frozen=True)
class SubmissionTotals:
    """Reference totals; the ERP recalculates its own."""
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class SubmissionContract:
    customer_number: str
    currency_code: str
    lines: tuple[SubmissionLine, ...]
    totals: SubmissionTotals
