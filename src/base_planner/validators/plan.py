"""Plan audit.

The coordinator never commits an invalid state, but documents can be
edited by hand and older files predate some rules. These checks report
what a loaded plan gets wrong without changing it.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING

from base_planner.grid.occupancy import OccupancyGrid, overlaps_at_ends
from base_planner.models.entities import Entity, StructureRole

if TYPE_CHECKING:
    from base_planner.coordinator import PlacementCoordinator


@dataclass
class ValidationError:
    """A single validation issue."""

    severity: str  # "error" | "warning"
    element_type: str
    element_id: str
    message: str


def validate_plan(coordinator: PlacementCoordinator) -> list[ValidationError]:
    """Run every plan check. Returns list of issues."""
    errors: list[ValidationError] = []
    for label, grid in _all_grids(coordinator):
        errors.extend(validate_bounds(grid, label))
        errors.extend(validate_overlaps(grid, label))
    errors.extend(validate_interior_links(coordinator))
    errors.extend(validate_cellars(coordinator))
    return errors


def _all_grids(coordinator: PlacementCoordinator) -> list[tuple[str, OccupancyGrid]]:
    grids = [("outer grid", coordinator.grid)]
    for space in coordinator.registry.spaces:
        for index in space.floor_indices:
            grids.append((f"{space.id} floor {index}", space.floors[index].grid))
    return grids


def validate_bounds(grid: OccupancyGrid, label: str = "grid") -> list[ValidationError]:
    """Every entity must lie fully inside its grid."""
    return [
        ValidationError(
            severity="error",
            element_type="Entity",
            element_id=e.entity_id,
            message=(
                f"'{e.kind}' at ({e.x},{e.y}) size {e.width}x{e.height} "
                f"extends outside the {grid.width}x{grid.height} {label}"
            ),
        )
        for e in grid
        if not e.rect.within(grid.width, grid.height)
    ]


def validate_overlaps(grid: OccupancyGrid, label: str = "grid") -> list[ValidationError]:
    """No two entities may overlap unless a gate meets a wall at its ends."""
    errors: list[ValidationError] = []
    for a, b in combinations(grid.entities, 2):
        if not a.overlaps(b) or _exempt(a, b) or _exempt(b, a):
            continue
        errors.append(
            ValidationError(
                severity="error",
                element_type="Entity",
                element_id=a.entity_id,
                message=f"'{a.entity_id}' overlaps '{b.entity_id}' on {label}",
            )
        )
    return errors


def _exempt(gate: Entity, wall: Entity) -> bool:
    return (
        gate.role == StructureRole.GATE
        and wall.role == StructureRole.WALL
        and overlaps_at_ends(gate.rect, wall.rect)
    )


def validate_interior_links(coordinator: PlacementCoordinator) -> list[ValidationError]:
    """Interior links must point at a space, and every space needs its owner."""
    errors: list[ValidationError] = []
    registry = coordinator.registry
    owners = {e.entity_id for e in coordinator.grid}

    for entity in coordinator.grid:
        if entity.interior_id and entity.interior_id not in registry:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Entity",
                    element_id=entity.entity_id,
                    message=(
                        f"'{entity.entity_id}' links interior '{entity.interior_id}' "
                        f"which does not exist"
                    ),
                )
            )

    for space in registry.spaces:
        if space.owner_id not in owners:
            errors.append(
                ValidationError(
                    severity="warning",
                    element_type="NestedSpace",
                    element_id=space.id,
                    message=(
                        f"Interior '{space.id}' belongs to '{space.owner_id}', "
                        f"which is not on the outer grid"
                    ),
                )
            )
    return errors


def validate_cellars(coordinator: PlacementCoordinator) -> list[ValidationError]:
    """A cellar exists exactly when something on floor 0 unlocks it."""
    errors: list[ValidationError] = []
    for space in coordinator.registry.spaces:
        if space.has_cellar and not space.cellar_unlocked:
            message = f"Interior '{space.id}' has a cellar but nothing on floor 0 unlocks it"
        elif space.cellar_unlocked and not space.has_cellar:
            message = f"Interior '{space.id}' has a cellar door but no cellar"
        else:
            continue
        errors.append(
            ValidationError(
                severity="error",
                element_type="NestedSpace",
                element_id=space.id,
                message=message,
            )
        )
    return errors
