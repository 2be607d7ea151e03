"""Surface (paving) types painted over grid cells.

Surfaces are independent of entity occupancy: a cell can carry a surface
and an entity at the same time.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SurfaceCategory(str, Enum):
    """Surface material family."""

    STONE = "stone"
    ORE = "ore"
    METAL = "metal"
    BRICK = "brick"
    SPECIAL = "special"
    INTERIOR = "interior"


class ShapeMode(str, Enum):
    """Shape used to turn a two-point drag into a set of cells."""

    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


class SurfaceType(BaseModel):
    """A paintable surface record: name, category, visual reference.

    Frozen, so one instance can be shared by every cell painted with it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: SurfaceCategory = SurfaceCategory.STONE
    image: str = Field(default="", description="Visual reference (image path)")
