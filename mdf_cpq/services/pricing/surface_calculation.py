"""
Surface area calculation for coated faces.

Deterministic per-face breakdown in m², used for price diagnostics and
coating material planning.
"""

from dataclasses import dataclass
from decimal import Decimal

from mdf_cpq.models.configuration import CoatingSide, MdfConfiguration

MM_PER_M = Decimal("1000")


@dataclass(frozen=True)
class SideArea:
    """Area of one coated face."""
    side: CoatingSide
    area_m2: Decimal
    total_area_m2: Decimal  # area × quantity


@dataclass(frozen=True)
class SurfaceAreaResult:
    total_surface_area_m2: Decimal
    surface_area_per_piece_m2: Decimal
    breakdown: tuple[SideArea, ...]


def side_area(side: CoatingSide, length_m: Decimal, width_m: Decimal, height_m: Decimal) -> Decimal:
    """Area of a single face in m²."""
    if side in (CoatingSide.TOP, CoatingSide.BOTTOM):
        return length_m * width_m
    if side in (CoatingSide.FRONT, CoatingSide.BACK):
        return length_m * height_m
    if side in (CoatingSide.LEFT, CoatingSide.RIGHT):
        return width_m * height_m
    raise ValueError(f"Unknown coating side: {side}")


def calculate_surface_area(configuration: MdfConfiguration) -> SurfaceAreaResult:
    """Area of every selected face, per piece and for the full quantity."""
    length_m = Decimal(configuration.length_mm) / MM_PER_M
    width_m = Decimal(configuration.width_mm) / MM_PER_M
    height_m = Decimal(configuration.height_mm) / MM_PER_M

    breakdown = []
    for side in configuration.coating_sides:
        area = side_area(side, length_m, width_m, height_m)
        breakdown.append(SideArea(side=side, area_m2=area, total_area_m2=area * configuration.quantity))

    return SurfaceAreaResult(
        total_surface_area_m2=sum((b.total_area_m2 for b in breakdown), Decimal("0")),
        surface_area_per_piece_m2=sum((b.area_m2 for b in breakdown), Decimal("0")),
        breakdown=tuple(breakdown),
    )
