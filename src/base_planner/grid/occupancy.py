"""Bounded collision space for placed entities.

The grid knows geometry and one exemption rule: a gate-like candidate may
overlap wall-like entities at the end cells of its long axis, or, failing
that, sit flush against another gate's matching edge. Which kinds are
gates or walls is decided by the caller (see PlacementCoordinator); the
grid only reads each entity's `role`.

Every mutation validates first and commits only on success. A rejected
move or rotation leaves the entity exactly as it was.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from base_planner.models.entities import Entity, StructureRole
from base_planner.models.geometry import Cell, Rect


class OccupancyGrid:
    """Entities on a width × height grid with a no-overlap invariant."""

    def __init__(
        self,
        width: int,
        height: int,
        entities: Iterable[Entity] | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._entities: list[Entity] = list(entities or [])

    # ── Size ──────────────────────────────────────────────────────────

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int) -> bool:
        """Change the grid size. Fails if any entity would fall outside."""
        if width <= 0 or height <= 0:
            return False
        if any(not e.rect.within(width, height) for e in self._entities):
            return False
        self._width = width
        self._height = height
        return True

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def entities(self) -> list[Entity]:
        """Placed entities in placement order (a new list, same objects)."""
        return list(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))

    def __contains__(self, entity: object) -> bool:
        return any(e is entity for e in self._entities)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OccupancyGrid):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._entities == other._entities
        )

    def get_entity_at(self, x: int, y: int) -> Entity | None:
        """First entity covering the cell, if any."""
        return next((e for e in self._entities if e.contains(x, y)), None)

    def get_entities_in_rect(self, p1: Cell, p2: Cell) -> list[Entity]:
        """Entities touching the inclusive box between two corners."""
        return [e for e in self._entities if e.rect.intersects_box(p1, p2)]

    def copy_entities(self) -> list[Entity]:
        """Value copies of every entity, for snapshots."""
        return [e.clone() for e in self._entities]

    # ── Validation ────────────────────────────────────────────────────

    def can_place(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        excluding: Entity | None = None,
        requires_exemption: bool = False,
    ) -> bool:
        """Check whether a width × height rectangle fits at (x, y).

        Rejects out-of-bounds rectangles and overlaps. With
        `requires_exemption`, overlapping a wall-like entity is allowed
        only at the two end cells of the candidate's long axis, and at
        least one such overlap is required. If there is none, the
        candidate is accepted only when it sits flush against a matching
        edge of another gate-like entity. The overlap check runs first.
        """
        if width <= 0 or height <= 0:
            return False
        candidate = Rect(x=x, y=y, width=width, height=height)
        if not candidate.within(self._width, self._height):
            return False

        wall_overlap = False
        for other in self._entities:
            if other is excluding:
                continue
            other_rect = other.rect
            if not candidate.overlaps(other_rect):
                continue
            if (
                requires_exemption
                and other.role == StructureRole.WALL
                and overlaps_at_ends(candidate, other_rect)
            ):
                wall_overlap = True
                continue
            return False

        if requires_exemption and not wall_overlap:
            return self._flush_with_gate(candidate, excluding)
        return True

    def _flush_with_gate(self, candidate: Rect, excluding: Entity | None) -> bool:
        """True if the candidate continues another gate along its long axis."""
        for other in self._entities:
            if other is excluding or other.role != StructureRole.GATE:
                continue
            r = other.rect
            if r.is_vertical != candidate.is_vertical:
                continue
            if candidate.is_vertical:
                if r.x == candidate.x and r.width == candidate.width and (
                    r.bottom == candidate.y or candidate.bottom == r.y
                ):
                    return True
            elif r.y == candidate.y and r.height == candidate.height and (
                r.right == candidate.x or candidate.right == r.x
            ):
                return True
        return False

    # ── Mutations ─────────────────────────────────────────────────────

    def add_entity(self, entity: Entity, requires_exemption: bool = False) -> bool:
        """Place an entity. Returns False if it doesn't fit."""
        if entity in self:
            return False
        if not self.can_place(
            entity.x, entity.y, entity.width, entity.height,
            requires_exemption=requires_exemption,
        ):
            return False
        self._entities.append(entity)
        return True

    def remove_entity(self, entity: Entity) -> bool:
        """Remove an entity (by identity). Returns False if it isn't here."""
        for i, e in enumerate(self._entities):
            if e is entity:
                del self._entities[i]
                return True
        return False

    def move_entity(
        self,
        entity: Entity,
        x: int,
        y: int,
        requires_exemption: bool = False,
    ) -> bool:
        """Move an entity to (x, y) if the new position is valid."""
        if entity not in self:
            return False
        if not self.can_place(
            x, y, entity.width, entity.height,
            excluding=entity, requires_exemption=requires_exemption,
        ):
            return False
        entity.x = x
        entity.y = y
        return True

    def rotate_entity(self, entity: Entity, requires_exemption: bool = False) -> bool:
        """Rotate an entity a quarter turn in place, swapping width and height."""
        if entity not in self:
            return False
        candidate = entity.rect.rotated()
        if not self.can_place(
            candidate.x, candidate.y, candidate.width, candidate.height,
            excluding=entity, requires_exemption=requires_exemption,
        ):
            return False
        entity.width = candidate.width
        entity.height = candidate.height
        entity.rotation = (entity.rotation + 90) % 360
        return True

    def clear(self) -> None:
        self._entities = []

    def load_entities(self, entities: Iterable[Entity]) -> None:
        """Replace all entities without collision checks (snapshots, documents)."""
        self._entities = list(entities)


def overlaps_at_ends(candidate: Rect, other: Rect) -> bool:
    """True if `other` covers only an end cell row/column of the candidate.

    The long axis is y when the candidate is taller than wide, x otherwise.
    """
    overlap = candidate.intersection(other)
    if overlap is None:
        return False
    if candidate.is_vertical:
        return overlap.height == 1 and overlap.y in (candidate.y, candidate.bottom - 1)
    return overlap.width == 1 and overlap.x in (candidate.x, candidate.right - 1)
