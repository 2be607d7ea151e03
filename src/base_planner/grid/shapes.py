"""Shape generators for bulk surface edits.

Pure functions from two corner cells to the list of cells the shape
covers. Degenerate input is normalized, never rejected: rectangle corners
may come in any order, and a circle whose edge point equals its center
covers just the center.
"""

from __future__ import annotations

import math

from base_planner.models.geometry import Cell
from base_planner.models.surfaces import ShapeMode


def line_cells(x0: int, y0: int, x1: int, y1: int) -> list[Cell]:
    """Cells on the line from (x0, y0) to (x1, y1), both ends included.

    Bresenham's algorithm with an integer error accumulator.
    """
    cells: list[Cell] = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    x, y = x0, y0
    while True:
        cells.append(Cell(x=x, y=y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy

    return cells


def rectangle_cells(x0: int, y0: int, x1: int, y1: int) -> list[Cell]:
    """Every cell of the inclusive box between two corners."""
    min_x, max_x = min(x0, x1), max(x0, x1)
    min_y, max_y = min(y0, y1), max(y0, y1)
    return [
        Cell(x=x, y=y)
        for x in range(min_x, max_x + 1)
        for y in range(min_y, max_y + 1)
    ]


def circle_cells(center_x: int, center_y: int, edge_x: int, edge_y: int) -> list[Cell]:
    """Filled disc centered on the first point, passing through the second.

    A cell is included when its squared distance to the center is at most
    radius². The squared radius is kept as an exact integer.
    """
    radius_sq = (edge_x - center_x) ** 2 + (edge_y - center_y) ** 2
    radius = math.sqrt(radius_sq)

    min_x = math.floor(center_x - radius)
    max_x = math.ceil(center_x + radius)
    min_y = math.floor(center_y - radius)
    max_y = math.ceil(center_y + radius)

    cells: list[Cell] = []
    for x in range(min_x, max_x + 1):
        for y in range(min_y, max_y + 1):
            if (x - center_x) ** 2 + (y - center_y) ** 2 <= radius_sq:
                cells.append(Cell(x=x, y=y))
    return cells


def cells_for_shape(start: Cell, end: Cell, mode: ShapeMode | str) -> list[Cell]:
    """Dispatch to the generator for `mode`."""
    mode = ShapeMode(mode)
    if mode == ShapeMode.LINE:
        return line_cells(start.x, start.y, end.x, end.y)
    if mode == ShapeMode.RECTANGLE:
        return rectangle_cells(start.x, start.y, end.x, end.y)
    return circle_cells(start.x, start.y, end.x, end.y)
