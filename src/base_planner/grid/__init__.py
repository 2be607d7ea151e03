"""Grid layers: entity occupancy, surface paint, and shape generators."""

from base_planner.grid.occupancy import OccupancyGrid
from base_planner.grid.surface import SurfaceLayer
from base_planner.grid.shapes import (
    cells_for_shape,
    circle_cells,
    line_cells,
    rectangle_cells,
)

__all__ = [
    "OccupancyGrid",
    "SurfaceLayer",
    "cells_for_shape",
    "circle_cells",
    "line_cells",
    "rectangle_cells",
]
