"""Two-point distance measurement on the grid.

Distances count cells inclusively: measuring from a cell to itself spans
one cell on each axis.
"""

from __future__ import annotations

import math

from base_planner.models.geometry import Cell


class MeasurementTool:
    """Click-click measuring tape."""

    def __init__(self) -> None:
        self.active = False
        self.first: Cell | None = None
        self.second: Cell | None = None

    def activate(self) -> None:
        self.active = True
        self.reset()

    def deactivate(self) -> None:
        self.active = False
        self.reset()

    def reset(self) -> None:
        self.first = None
        self.second = None

    def set_first_point(self, point: Cell | tuple[int, int]) -> None:
        self.first = Cell.of(point)
        self.second = None

    def set_second_point(self, point: Cell | tuple[int, int]) -> None:
        """Set the end point. Without a start point this starts a new measurement."""
        if self.first is None:
            self.set_first_point(point)
            return
        self.second = Cell.of(point)

    @property
    def is_complete(self) -> bool:
        return self.first is not None and self.second is not None

    @property
    def delta_x(self) -> int:
        if self.first is None or self.second is None:
            return 0
        return abs(self.second.x - self.first.x) + 1

    @property
    def delta_y(self) -> int:
        if self.first is None or self.second is None:
            return 0
        return abs(self.second.y - self.first.y) + 1

    @property
    def euclidean(self) -> float:
        if not self.is_complete:
            return 0.0
        return math.sqrt(self.delta_x ** 2 + self.delta_y ** 2)

    @property
    def manhattan(self) -> int:
        if not self.is_complete:
            return 0
        return self.delta_x + self.delta_y - 1

    def summary(self) -> dict:
        """Current measurement as plain data."""
        return {
            "first": self.first.as_tuple() if self.first else None,
            "second": self.second.as_tuple() if self.second else None,
            "delta_x": self.delta_x,
            "delta_y": self.delta_y,
            "euclidean": round(self.euclidean, 2),
            "manhattan": self.manhattan,
        }
