"""Read-only plan summaries for presentation and the CLI.

Everything here returns plain JSON-ready data and never mutates the plan.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

from base_planner.grid.surface import SurfaceLayer
from base_planner.interiors.registry import NestedSpace
from base_planner.models.entities import Entity

if TYPE_CHECKING:
    from base_planner.coordinator import PlacementCoordinator


def describe_entity(entity: Entity) -> dict:
    """Full geometry of one entity."""
    info = {
        "id": entity.entity_id,
        "kind": entity.kind,
        "category": entity.category.value,
        "x": entity.x,
        "y": entity.y,
        "width": entity.width,
        "height": entity.height,
        "rotation": entity.rotation,
    }
    if entity.orientation is not None:
        info["orientation"] = entity.orientation.value
    if entity.interior_id:
        info["interior_id"] = entity.interior_id
    return info


def describe_interior(space: NestedSpace) -> dict:
    """Size, floor list and per-floor counts of a nested space."""
    return {
        "id": space.id,
        "owner": space.owner_id,
        "width": space.width,
        "height": space.height,
        "floors": space.floor_indices,
        "has_cellar": space.has_cellar,
        "contents": {
            str(index): {
                "entities": len(floor.grid),
                "surface_cells": len(floor.surface),
            }
            for index, floor in sorted(space.floors.items())
        },
    }


def surface_counts(surface: SurfaceLayer) -> dict[str, int]:
    """Painted cells per surface name."""
    return dict(Counter(s.name for _, s in surface.items()))


def entity_counts(entities: Iterable[Entity]) -> dict[str, dict[str, int]]:
    """Entity counts per category and per kind."""
    entities = list(entities)
    return {
        "by_category": dict(Counter(e.category.value for e in entities)),
        "by_kind": dict(Counter(e.kind for e in entities)),
    }


def plan_summary(coordinator: PlacementCoordinator) -> dict:
    """Overview of the outer grid, its interiors, and history state."""
    grid = coordinator.grid
    return {
        "grid": {"width": grid.width, "height": grid.height},
        "entities": len(grid),
        **entity_counts(grid),
        "surface_cells": len(coordinator.surface),
        "surfaces": surface_counts(coordinator.surface),
        "interiors": [describe_interior(s) for s in coordinator.interiors()],
        "history": {
            "entries": len(coordinator.history),
            "can_undo": coordinator.can_undo,
            "can_redo": coordinator.can_redo,
        },
    }
