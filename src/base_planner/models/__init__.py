"""Planner data models."""

from base_planner.models.geometry import Cell, Rect
from base_planner.models.entities import (
    Category,
    Entity,
    LineCell,
    Orientation,
    StructureRole,
    entity_id_for,
)
from base_planner.models.surfaces import ShapeMode, SurfaceCategory, SurfaceType
from base_planner.models.catalog import Catalog, KindSpec, default_catalog
from base_planner.models.document import (
    EntityRecord,
    FloorRecord,
    InteriorRecord,
    PlanDocument,
    SurfaceRecord,
)

__all__ = [
    "Cell",
    "Rect",
    "Category",
    "Entity",
    "LineCell",
    "Orientation",
    "StructureRole",
    "entity_id_for",
    "ShapeMode",
    "SurfaceCategory",
    "SurfaceType",
    "Catalog",
    "KindSpec",
    "default_catalog",
    "EntityRecord",
    "FloorRecord",
    "InteriorRecord",
    "PlanDocument",
    "SurfaceRecord",
]
