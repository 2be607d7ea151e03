"""Integer grid primitives: cells and axis-aligned rectangles."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class Cell(BaseModel):
    """A single grid cell, addressed by integer column/row."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def distance_to(self, other: Cell) -> float:
        """Euclidean distance to another cell."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)

    @classmethod
    def of(cls, point: Cell | tuple[int, int]) -> Cell:
        """Coerce an (x, y) tuple into a Cell. Cells pass through."""
        if isinstance(point, Cell):
            return point
        return cls(x=point[0], y=point[1])


class Rect(BaseModel):
    """Axis-aligned rectangle of cells: [x, x+width) × [y, y+height)."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_vertical(self) -> bool:
        """True when the long axis runs along y."""
        return self.height > self.width

    def contains(self, x: int, y: int) -> bool:
        """Check if a cell lies inside this rectangle."""
        return self.x <= x < self.right and self.y <= y < self.bottom

    def overlaps(self, other: Rect) -> bool:
        """Exclusive-boundary intersection. Touching edges do not overlap."""
        return not (
            self.x >= other.right
            or self.right <= other.x
            or self.y >= other.bottom
            or self.bottom <= other.y
        )

    def intersection(self, other: Rect) -> Rect | None:
        """The overlapping region, or None when the rectangles don't overlap."""
        if not self.overlaps(other):
            return None
        x0, y0 = max(self.x, other.x), max(self.y, other.y)
        x1, y1 = min(self.right, other.right), min(self.bottom, other.bottom)
        return Rect(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    def within(self, width: int, height: int) -> bool:
        """Check if the rectangle lies fully inside [0, width) × [0, height)."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.right <= width
            and self.bottom <= height
        )

    def intersects_box(self, p1: Cell, p2: Cell) -> bool:
        """Inclusive test against the cell box spanned by two corners."""
        min_x, max_x = min(p1.x, p2.x), max(p1.x, p2.x)
        min_y, max_y = min(p1.y, p2.y), max(p1.y, p2.y)
        return (
            self.x <= max_x
            and self.right - 1 >= min_x
            and self.y <= max_y
            and self.bottom - 1 >= min_y
        )

    def rotated(self) -> Rect:
        """Same origin with width and height swapped."""
        return Rect(x=self.x, y=self.y, width=self.height, height=self.width)

    def moved(self, x: int, y: int) -> Rect:
        return Rect(x=x, y=y, width=self.width, height=self.height)
