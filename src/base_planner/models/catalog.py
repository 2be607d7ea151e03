"""Buildable kinds and surface types available to a plan.

The catalog is a collaborator handed to the coordinator at construction.
It decides per kind whether an entity is wall-like, gate-like, line-built,
or interior-capable; the grids themselves stay generic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from base_planner.models.entities import (
    Category,
    Entity,
    Orientation,
    StructureRole,
)
from base_planner.models.surfaces import SurfaceType


class KindSpec(BaseModel):
    """Catalog definition of a buildable kind."""

    name: str
    category: Category = Category.OTHER
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: str = "#808080"
    image: str | None = None
    image_url: str | None = None
    uses_line_tool: bool = False
    role: StructureRole = StructureRole.NONE
    has_interior: bool = False
    interior_width: int | None = Field(default=None, gt=0)
    interior_height: int | None = Field(default=None, gt=0)
    default_floors: int = Field(default=1, ge=1)
    has_stairs: bool = False
    unlocks_cellar: bool = False

    @model_validator(mode="after")
    def interior_needs_size(self) -> KindSpec:
        if self.has_interior and (
            self.interior_width is None or self.interior_height is None
        ):
            raise ValueError(
                f"Kind '{self.name}' has an interior but no interior_width/interior_height"
            )
        return self

    def footprint(self, rotation: int = 0) -> tuple[int, int]:
        """(width, height) after applying a quarter-turn rotation."""
        if rotation in (90, 270):
            return self.height, self.width
        return self.width, self.height

    def create_entity(self, x: int, y: int, rotation: int = 0) -> Entity:
        """Build an unplaced entity of this kind at (x, y)."""
        width, height = self.footprint(rotation)
        return Entity(
            kind=self.name,
            category=self.category,
            x=x,
            y=y,
            width=width,
            height=height,
            color=self.color,
            image=self.image,
            image_url=self.image_url,
            orientation=Orientation.CORNER if self.uses_line_tool else None,
            rotation=rotation,
            uses_line_tool=self.uses_line_tool,
            role=self.role,
            has_interior=self.has_interior,
            unlocks_cellar=self.unlocks_cellar,
            has_stairs=self.has_stairs,
        )


class Catalog:
    """Lookup of kinds and surface types by name."""

    def __init__(
        self,
        kinds: list[KindSpec] | None = None,
        surfaces: list[SurfaceType] | None = None,
    ) -> None:
        self._kinds: dict[str, KindSpec] = {k.name: k for k in kinds or []}
        self._surfaces: dict[str, SurfaceType] = {s.name: s for s in surfaces or []}

    @classmethod
    def from_data(cls, kinds: list[dict], surfaces: list[dict]) -> Catalog:
        """Build a catalog from raw records (e.g. parsed JSON data files)."""
        return cls(
            kinds=[KindSpec.model_validate(k) for k in kinds],
            surfaces=[SurfaceType.model_validate(s) for s in surfaces],
        )

    @property
    def kinds(self) -> list[KindSpec]:
        return list(self._kinds.values())

    @property
    def surfaces(self) -> list[SurfaceType]:
        return list(self._surfaces.values())

    def find_kind(self, name: str) -> KindSpec | None:
        return self._kinds.get(name)

    def require_kind(self, name: str) -> KindSpec:
        """Get a kind by name or raise ValueError."""
        spec = self._kinds.get(name)
        if spec is None:
            raise ValueError(
                f"Kind '{name}' not found. Available: {sorted(self._kinds)}"
            )
        return spec

    def find_surface(self, name: str) -> SurfaceType | None:
        return self._surfaces.get(name)

    def require_surface(self, name: str) -> SurfaceType:
        """Get a surface type by name or raise ValueError."""
        surface = self._surfaces.get(name)
        if surface is None:
            raise ValueError(
                f"Surface '{name}' not found. Available: {sorted(self._surfaces)}"
            )
        return surface


# Built-in data set, enough to plan a walled homestead.
DEFAULT_KINDS: list[dict] = [
    {"name": "Palisade", "category": "defense", "width": 1, "height": 1,
     "color": "#6B4226", "image": "images/buildables/palisade.png",
     "uses_line_tool": True, "role": "wall"},
    {"name": "Brick Wall", "category": "defense", "width": 1, "height": 1,
     "color": "#B22222", "image": "images/buildables/brick_wall.png",
     "uses_line_tool": True, "role": "wall"},
    {"name": "Palisade Gate", "category": "defense", "width": 4, "height": 1,
     "color": "#8B5A2B", "image": "images/buildables/palisade_gate.png",
     "role": "gate"},
    {"name": "Brick Wall Gate", "category": "defense", "width": 4, "height": 1,
     "color": "#A0522D", "image": "images/buildables/brick_wall_gate.png",
     "role": "gate"},
    {"name": "Wooden Fence", "category": "agriculture", "width": 1, "height": 1,
     "color": "#DEB887", "image": "images/buildables/wooden_fence.png",
     "uses_line_tool": True},
    {"name": "Log Cabin", "category": "housing", "width": 5, "height": 5,
     "color": "#4169E1", "image": "images/buildables/log_cabin.png",
     "has_interior": True, "interior_width": 10, "interior_height": 10},
    {"name": "Timber House", "category": "housing", "width": 7, "height": 7,
     "color": "#27408B", "image": "images/buildables/timber_house.png",
     "has_interior": True, "interior_width": 14, "interior_height": 14,
     "default_floors": 2, "has_stairs": True},
    {"name": "Cellar Door", "category": "furniture", "width": 1, "height": 1,
     "color": "#5C4033", "image": "images/buildables/cellar_door.png",
     "unlocks_cellar": True},
    {"name": "Chest", "category": "storage", "width": 1, "height": 1,
     "color": "#8B4513", "image": "images/buildables/chest.png"},
    {"name": "Cupboard", "category": "storage", "width": 1, "height": 2,
     "color": "#8B4513", "image": "images/buildables/cupboard.png"},
    {"name": "Crucible", "category": "crafting", "width": 2, "height": 2,
     "color": "#FF6347", "image": "images/buildables/crucible.png"},
    {"name": "Garden Pot", "category": "agriculture", "width": 1, "height": 1,
     "color": "#32CD32", "image": "images/buildables/garden_pot.png"},
    {"name": "Statue", "category": "decoration", "width": 2, "height": 2,
     "color": "#FFD700", "image": "images/buildables/statue.png"},
]

DEFAULT_SURFACES: list[dict] = [
    {"name": "Arkose", "category": "stone", "image": "images/paving/Arkose.png"},
    {"name": "Granite", "category": "stone", "image": "images/paving/Granite.png"},
    {"name": "Basalt", "category": "stone", "image": "images/paving/Basalt.png"},
    {"name": "Cassiterite", "category": "ore", "image": "images/paving/Cassiterite.png"},
    {"name": "Iron Plate", "category": "metal", "image": "images/paving/Iron_Plate.png"},
    {"name": "Clay Brick", "category": "brick", "image": "images/paving/Clay_Brick.png"},
    {"name": "Marble", "category": "special", "image": "images/paving/Marble.png"},
    {"name": "interior_floor", "category": "interior",
     "image": "images/paving/interior_floor.png"},
]


def default_catalog() -> Catalog:
    """The built-in catalog."""
    return Catalog.from_data(DEFAULT_KINDS, DEFAULT_SURFACES)
