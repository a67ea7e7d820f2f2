"""Price calculation result shared by the pricing engine and price lookup."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class PriceResult:
    """
    Computed price for a configured item.

    ``details`` is a diagnostic breakdown (areas, surcharge factor,
    upstream identifiers); nothing downstream depends on its keys.
    """
    unit_price: Decimal
    total_price: Decimal
    currency: str
    item_number: str
    quantity: int
    unit_of_measure: str | None = None
    details: dict[str, Any] = field(default_factory=dict, compare=False)
