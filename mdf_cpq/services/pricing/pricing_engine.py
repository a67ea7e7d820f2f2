"""
Powder coating pricing engine.

Price formula (Kempa price list):
- Base price per m² of front face (catalog price, 166 EUR/m² by default)
- Area per piece: length × width in m²
- Minimum chargeable area per piece: 0.15 m²
- Boards of 30 mm or thicker: +35% on the m² price
"""

from decimal import Decimal

from mdf_cpq.config.settings import settings
from mdf_cpq.models.configuration import MdfConfiguration
from mdf_cpq.models.pricing import PriceResult
from mdf_cpq.utils.money import round2, to_decimal

DEFAULT_PRICE_PER_M2 = Decimal("166")
MIN_AREA_PER_PIECE_M2 = Decimal("0.15")
THICKNESS_SURCHARGE_THRESHOLD_MM = 30
THICKNESS_SURCHARGE_FACTOR = Decimal("1.35")

MM_PER_M = Decimal("1000")


def thickness_factor(height_mm: int) -> Decimal:
    """Surcharge multiplier for the board thickness."""
    if height_mm >= THICKNESS_SURCHARGE_THRESHOLD_MM:
        return THICKNESS_SURCHARGE_FACTOR
    return Decimal("1")


def calculate_price(
    configuration: MdfConfiguration,
    base_price_per_m2: Decimal | int | str | None = None,
    currency: str | None = None,
    item_number: str | None = None,
) -> PriceResult:
    """
    Price a configuration.

    Only the front face (length × width) is charged, in line with the
    catalog. Pieces under the minimum area are billed at the minimum.

    Args:
        configuration: validated configuration
        base_price_per_m2: override for the catalog m² price
        currency: ISO 4217 code, defaults to the configured price list currency
        item_number: catalog item the price belongs to

    Returns:
        PriceResult with rounded unit and total price and the area breakdown
    """
    base_price = to_decimal(
        base_price_per_m2 if base_price_per_m2 is not None else settings.pricing.base_price_per_m2
    )

    length_m = Decimal(configuration.length_mm) / MM_PER_M
    width_m = Decimal(configuration.width_mm) / MM_PER_M

    raw_area = length_m * width_m
    charged_area = max(raw_area, MIN_AREA_PER_PIECE_M2)

    factor = thickness_factor(configuration.height_mm)
    effective_price = base_price * factor

    unit_price = round2(charged_area * effective_price)
    total_price = round2(unit_price * configuration.quantity)

    return PriceResult(
        unit_price=unit_price,
        total_price=total_price,
        currency=currency or settings.pricing.currency,
        item_number=item_number or settings.pricing.product_number,
        quantity=configuration.quantity,
        details={
            "raw_area_per_piece_m2": raw_area,
            "charged_area_per_piece_m2": charged_area,
            "total_charged_area_m2": charged_area * configuration.quantity,
            "base_price_per_m2": base_price,
            "effective_price_per_m2": effective_price,
            "thickness_factor": factor,
        },
    )
