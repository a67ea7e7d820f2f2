"""
Pricing Services.

Provides functionality for:
- Powder coating price calculation (minimum area, thickness surcharge)
- Per-face surface area breakdown
"""

from mdf_cpq.services.pricing.pricing_engine import (
    DEFAULT_PRICE_PER_M2,
    MIN_AREA_PER_PIECE_M2,
    THICKNESS_SURCHARGE_FACTOR,
    THICKNESS_SURCHARGE_THRESHOLD_MM,
    calculate_price,
    thickness_factor,
)
from mdf_cpq.services.pricing.surface_calculation import (
    SideArea,
    SurfaceAreaResult,
    calculate_surface_area,
)

__all__ = [
    "DEFAULT_PRICE_PER_M2",
    "MIN_AREA_PER_PIECE_M2",
    "THICKNESS_SURCHARGE_FACTOR",
    "THICKNESS_SURCHARGE_THRESHOLD_MM",
    "calculate_price",
    "thickness_factor",
    "SideArea",
    "SurfaceAreaResult",
    "calculate_surface_area",
]
