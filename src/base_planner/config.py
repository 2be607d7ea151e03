"""Planner configuration.

Defaults: a 50×50 plan, 50 undo steps,
interiors floored with `interior_floor`, cellars dug out of Arkose.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from base_planner.models.surfaces import SurfaceCategory, SurfaceType

DEFAULT_GRID_WIDTH = 50
DEFAULT_GRID_HEIGHT = 50
HISTORY_LIMIT = 50

INTERIOR_FLOOR_SURFACE = SurfaceType(
    name="interior_floor",
    category=SurfaceCategory.INTERIOR,
    image="images/paving/interior_floor.png",
)

CELLAR_FLOOR_SURFACE = SurfaceType(
    name="Arkose",
    category=SurfaceCategory.STONE,
    image="images/paving/Arkose.png",
)


class PlannerConfig(BaseModel):
    """Settings handed to the coordinator at construction."""

    grid_width: int = Field(default=DEFAULT_GRID_WIDTH, gt=0)
    grid_height: int = Field(default=DEFAULT_GRID_HEIGHT, gt=0)
    history_limit: int = Field(default=HISTORY_LIMIT, ge=1)
    interior_surface: SurfaceType = INTERIOR_FLOOR_SURFACE
    cellar_surface: SurfaceType = CELLAR_FLOOR_SURFACE
