"""
MDF powder coating configuration models.

A configuration describes one batch of identical boards: dimensions in
millimeters, quantity, the faces to coat and optional structure and
drill positions. Configurations are validated on construction and frozen.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_DIMENSION_MM = 1
MAX_DIMENSION_MM = 10_000
MIN_QUANTITY = 1
MAX_QUANTITY = 1_000_000


class CoatingSide(str, Enum):
    """Faces of a board that can be powder coated."""
    TOP = "top"
    BOTTOM = "bottom"
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"


class SurfaceStructure(str, Enum):
    """Available Kempa surface structures."""
    LINE = "line"
    STONE = "stone"
    LEATHER = "leather"
    LINEN = "linen"


class DrillPosition(BaseModel):
    """A hole drilled into one face (handles, hinges, grips)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    side: CoatingSide
    position1_cm: float = Field(ge=0)
    position2_cm: float = Field(ge=0)
    diameter_mm: float = Field(default=5, gt=0)


class DimensionSet(BaseModel):
    """One group of boards inside a multi-size request."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    length_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    width_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    height_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    quantity: int = Field(ge=MIN_QUANTITY, le=MAX_QUANTITY)


class MdfConfiguration(BaseModel):
    """
    Configuration for MDF powder coating.

    Dimensions are in millimeters; surface calculations convert to m².
    The primary dimensions stay authoritative for pricing even when
    ``dimension_sets`` lists additional sizes.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    length_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    width_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    height_mm: int = Field(ge=MIN_DIMENSION_MM, le=MAX_DIMENSION_MM)
    quantity: int = Field(ge=MIN_QUANTITY, le=MAX_QUANTITY)
    coating_sides: tuple[CoatingSide, ...] = Field(min_length=1)
    structure: SurfaceStructure | None = None
    drill_positions: tuple[DrillPosition, ...] = ()
    dimension_sets: tuple[DimensionSet, ...] = ()

    @field_validator("coating_sides")
    @classmethod
    def _no_duplicate_sides(cls, sides: tuple[CoatingSide, ...]) -> tuple[CoatingSide, ...]:
        if len(set(sides)) != len(sides):
            raise ValueError("Duplicate sides are not allowed")
        return sides

    def with_quantity(self, quantity: int) -> "MdfConfiguration":
        """Return a copy with a new quantity, re-running validation."""
        return MdfConfiguration.model_validate(
            {**self.model_dump(), "quantity": quantity}
        )
