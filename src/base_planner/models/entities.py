"""Placed entities: buildings, walls, gates, furniture.

An entity is a rectangle of cells with a kind taken from the catalog.
Its identity is derived from kind and position, so the same id comes back
after a save/load round trip without storing it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from base_planner.models.geometry import Cell, Rect


class Category(str, Enum):
    """Catalog category of a buildable kind."""

    STORAGE = "storage"
    CRAFTING = "crafting"
    AGRICULTURE = "agriculture"
    HOUSING = "housing"
    DEFENSE = "defense"
    DECORATION = "decoration"
    FURNITURE = "furniture"
    OTHER = "other"


class Orientation(str, Enum):
    """Orientation of a line-built cell.

    CORNER marks an endpoint or a junction and is never drawn rotated.
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    CORNER = "corner"


class StructureRole(str, Enum):
    """How an entity takes part in the gate/wall overlap exemption.

    WALL: wall-like structure a gate may overlap at its end cells
    GATE: needs a wall overlap (or an adjacent gate) to be placed
    NONE: ordinary entity, no exemption
    """

    NONE = "none"
    WALL = "wall"
    GATE = "gate"


VALID_ROTATIONS = (0, 90, 180, 270)


class LineCell(BaseModel):
    """A cell of a line-building run, tagged with its orientation."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    orientation: Orientation

    @property
    def cell(self) -> Cell:
        return Cell(x=self.x, y=self.y)


class Entity(BaseModel):
    """A rectangle placed on an occupancy grid.

    Owned by exactly one grid: the outer plan or one floor of an interior.
    `asset` is an opaque handle supplied by the presentation layer; it is
    carried along but never interpreted or serialized.
    """

    kind: str = Field(description="Catalog kind name, e.g. 'Palisade'")
    category: Category = Category.OTHER
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: str = "#808080"
    image: str | None = None
    image_url: str | None = None
    orientation: Orientation | None = Field(
        default=None, description="Only set for line-built structures"
    )
    rotation: int = Field(default=0, description="Visual rotation in degrees")
    uses_line_tool: bool = False
    role: StructureRole = StructureRole.NONE
    has_interior: bool = False
    interior_id: str | None = None
    unlocks_cellar: bool = False
    has_stairs: bool = False
    asset: Any = Field(default=None, exclude=True, repr=False)

    @field_validator("rotation")
    @classmethod
    def quarter_turns_only(cls, v: int) -> int:
        if v not in VALID_ROTATIONS:
            raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {v}")
        return v

    @property
    def entity_id(self) -> str:
        """Deterministic identity from kind and position."""
        return entity_id_for(self.kind, self.x, self.y)

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)

    @property
    def is_linear(self) -> bool:
        """True for line-built structures (walls, fences)."""
        return self.orientation is not None

    def contains(self, x: int, y: int) -> bool:
        return self.rect.contains(x, y)

    def overlaps(self, other: Entity) -> bool:
        return self.rect.overlaps(other.rect)

    def clone(self) -> Entity:
        """Value copy. All fields are immutable scalars; the asset handle is shared."""
        return self.model_copy()


def entity_id_for(kind: str, x: int, y: int) -> str:
    return f"{kind}_{x}_{y}"
