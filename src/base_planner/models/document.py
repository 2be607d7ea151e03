"""Persisted plan document.

Field names follow the JSON the planner has always written (camelCase),
including the legacy shapes:

- a single `gridSize` instead of `gridWidth`/`gridHeight`
- interiors with flat `items`/`paving` (floor 0 only) instead of `floorData`

Everything is validated here, once. Past this boundary the rest of the
package only sees typed records.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from base_planner.models.entities import Category, Orientation, VALID_ROTATIONS
from base_planner.models.surfaces import SurfaceCategory


def cell_key(x: int, y: int) -> str:
    """Document key for a cell, e.g. '3,7'."""
    return f"{x},{y}"


def parse_cell_key(key: str) -> tuple[int, int]:
    """Inverse of cell_key. Raises ValueError on anything else."""
    parts = key.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid cell key '{key}' (expected 'x,y')")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid cell key '{key}' (expected integers)") from None


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SurfaceRecord(_Record):
    """One painted cell."""

    name: str
    category: SurfaceCategory
    image: str = ""


def _check_paving_keys(value: dict[str, SurfaceRecord]) -> dict[str, SurfaceRecord]:
    for key in value:
        parse_cell_key(key)
    return value


PavingMap = Annotated[dict[str, SurfaceRecord], AfterValidator(_check_paving_keys)]


class EntityRecord(_Record):
    """A placed entity as written to disk."""

    name: str
    category: Category = Category.OTHER
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    color: str = "#808080"
    image: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    orientation: Orientation | None = None
    rotation: int = 0
    uses_line_tool: bool = Field(default=False, alias="usesLineTool")
    has_interior: bool = Field(default=False, alias="hasInterior")
    interior_id: str | None = Field(default=None, alias="interiorId")
    unlocks_cellar: bool = Field(default=False, alias="unlocksCellar")
    has_stairs: bool = Field(default=False, alias="hasStairs")

    @field_validator("rotation")
    @classmethod
    def quarter_turns_only(cls, v: int) -> int:
        if v not in VALID_ROTATIONS:
            raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {v}")
        return v


class FloorRecord(_Record):
    """Contents of one interior floor."""

    items: list[EntityRecord] = Field(default_factory=list)
    paving: PavingMap = Field(default_factory=dict)


class InteriorRecord(_Record):
    """A nested space. Either legacy flat floor-0 contents or `floorData`."""

    id: str | None = None
    building_id: str | None = Field(default=None, alias="buildingId")
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    floors: int = Field(default=1, ge=1)
    items: list[EntityRecord] = Field(default_factory=list)
    paving: PavingMap = Field(default_factory=dict)
    floor_data: dict[int, FloorRecord] | None = Field(default=None, alias="floorData")

    @property
    def is_legacy(self) -> bool:
        return self.floor_data is None

    def floor_records(self) -> dict[int, FloorRecord]:
        """Per-floor contents, resolving the legacy flat layout to floor 0."""
        if self.floor_data is not None:
            return dict(self.floor_data)
        return {0: FloorRecord(items=self.items, paving=self.paving)}


class PlanDocument(_Record):
    """Top-level saved plan."""

    grid_width: int | None = Field(default=None, gt=0, alias="gridWidth")
    grid_height: int | None = Field(default=None, gt=0, alias="gridHeight")
    grid_size: int | None = Field(default=None, gt=0, alias="gridSize")
    items: list[EntityRecord] = Field(default_factory=list)
    paving: PavingMap = Field(default_factory=dict)
    interiors: dict[str, InteriorRecord] = Field(default_factory=dict)

    @field_validator("interiors", mode="before")
    @classmethod
    def null_interiors(cls, v: object) -> object:
        return {} if v is None else v

    @model_validator(mode="after")
    def resolve_legacy_size(self) -> PlanDocument:
        if self.grid_size is not None and (
            self.grid_width is None or self.grid_height is None
        ):
            self.grid_width = self.grid_size
            self.grid_height = self.grid_size
        return self

    def resolved_size(self, default_width: int, default_height: int) -> tuple[int, int]:
        """(width, height), falling back to the given defaults."""
        return (
            self.grid_width or default_width,
            self.grid_height or default_height,
        )

    def to_json(self) -> str:
        """Serialize with the on-disk (camelCase) field names."""
        return self.model_dump_json(
            by_alias=True, exclude_none=True, exclude={"grid_size"}, indent=2
        )
