"""Nested spaces: independent per-floor grids owned by a placed entity.

Floor indices: 0 is the ground floor, positive floors are above grade and
-1 is the cellar. Ground-and-above floors exist from creation. The cellar
is derived state: it exists while a cellar-unlocking entity sits on floor
0, and the coordinator keeps it in step through ensure_cellar() and
maybe_remove_cellar().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from base_planner.config import PlannerConfig
from base_planner.grid.occupancy import OccupancyGrid
from base_planner.grid.surface import SurfaceLayer
from base_planner.models.entities import Entity

logger = logging.getLogger(__name__)

GROUND_FLOOR = 0
CELLAR_FLOOR = -1


@dataclass
class Floor:
    """One level of a nested space."""

    grid: OccupancyGrid
    surface: SurfaceLayer

    def copy(self) -> Floor:
        return Floor(
            grid=OccupancyGrid(
                self.grid.width, self.grid.height, self.grid.copy_entities()
            ),
            surface=SurfaceLayer(self.surface.copy_cells()),
        )


@dataclass
class NestedSpace:
    """A sub-grid owned by one entity, with one Floor per level."""

    id: str
    owner_id: str
    width: int
    height: int
    floor_count: int = 1
    floors: dict[int, Floor] = field(default_factory=dict)

    def get_floor(self, index: int) -> Floor | None:
        return self.floors.get(index)

    def get_grid(self, index: int) -> OccupancyGrid | None:
        floor = self.floors.get(index)
        return floor.grid if floor else None

    def get_surface(self, index: int) -> SurfaceLayer | None:
        floor = self.floors.get(index)
        return floor.surface if floor else None

    @property
    def floor_indices(self) -> list[int]:
        """All floors, ascending, cellar included."""
        return sorted(self.floors)

    @property
    def has_cellar(self) -> bool:
        return CELLAR_FLOOR in self.floors

    @property
    def cellar_unlocked(self) -> bool:
        """True while some entity on floor 0 unlocks the cellar."""
        ground = self.get_grid(GROUND_FLOOR)
        return ground is not None and any(e.unlocks_cellar for e in ground)

    def find_entity(self, entity: Entity) -> int | None:
        """Floor index holding this entity (by identity), if any."""
        for index, floor in self.floors.items():
            if entity in floor.grid:
                return index
        return None

    def copy(self) -> NestedSpace:
        return NestedSpace(
            id=self.id,
            owner_id=self.owner_id,
            width=self.width,
            height=self.height,
            floor_count=self.floor_count,
            floors={i: f.copy() for i, f in self.floors.items()},
        )


class NestedSpaceRegistry:
    """All nested spaces of a plan, keyed by space id."""

    def __init__(self, config: PlannerConfig | None = None) -> None:
        self.config = config or PlannerConfig()
        self._spaces: dict[str, NestedSpace] = {}

    # ── Lifecycle ─────────────────────────────────────────────────────

    def create(
        self,
        owner_id: str,
        width: int,
        height: int,
        floor_count: int = 1,
        space_id: str | None = None,
    ) -> str:
        """Allocate a space with floors 0..floor_count-1, each pre-painted.

        Without an explicit id one is derived from the owner id.
        """
        if floor_count < 1:
            raise ValueError(f"floor_count must be at least 1, got {floor_count}")
        if space_id is None:
            space_id = self._unique_id(f"interior_{owner_id}")
        elif space_id in self._spaces:
            raise ValueError(f"Nested space '{space_id}' already exists")

        space = NestedSpace(
            id=space_id,
            owner_id=owner_id,
            width=width,
            height=height,
            floor_count=floor_count,
        )
        for index in range(floor_count):
            space.floors[index] = self._new_floor(
                width, height, self.config.interior_surface
            )
        self._spaces[space_id] = space
        logger.info(
            "Created nested space %s (%dx%d, %d floor(s)) for %s",
            space_id, width, height, floor_count, owner_id,
        )
        return space_id

    def add(self, space: NestedSpace) -> None:
        """Register a fully built space (document load)."""
        if space.id in self._spaces:
            raise ValueError(f"Nested space '{space.id}' already exists")
        self._spaces[space.id] = space

    def remove(self, owner_id: str) -> bool:
        """Delete the space owned by `owner_id` together with all its floors."""
        space = self.get_by_owner(owner_id)
        if space is None:
            return False
        return self.remove_space(space.id)

    def remove_space(self, space_id: str) -> bool:
        """Delete a space by its own id."""
        space = self._spaces.pop(space_id, None)
        if space is None:
            return False
        logger.info("Removed nested space %s (owner %s)", space_id, space.owner_id)
        return True

    def reassign_owner(self, space_id: str, new_owner_id: str) -> bool:
        """Point a space at its owner's new id after the owner moved."""
        space = self._spaces.get(space_id)
        if space is None:
            return False
        space.owner_id = new_owner_id
        return True

    def clear(self) -> None:
        self._spaces.clear()

    # ── Lookup ────────────────────────────────────────────────────────

    def get(self, space_id: str) -> NestedSpace | None:
        return self._spaces.get(space_id)

    def get_by_owner(self, owner_id: str) -> NestedSpace | None:
        return next(
            (s for s in self._spaces.values() if s.owner_id == owner_id), None
        )

    def get_all_floors(self, space_id: str) -> list[int]:
        """Floor indices of a space, ascending. Empty for an unknown id."""
        space = self._spaces.get(space_id)
        return space.floor_indices if space else []

    @property
    def spaces(self) -> list[NestedSpace]:
        return list(self._spaces.values())

    def __len__(self) -> int:
        return len(self._spaces)

    def __contains__(self, space_id: object) -> bool:
        return space_id in self._spaces

    def locate(self, entity: Entity) -> tuple[NestedSpace, int] | None:
        """(space, floor index) holding the entity, if it is in any space."""
        for space in self._spaces.values():
            index = space.find_entity(entity)
            if index is not None:
                return space, index
        return None

    # ── Cellar ────────────────────────────────────────────────────────

    def ensure_cellar(self, space_id: str) -> bool:
        """Create floor -1 if it doesn't exist yet. Returns True if created."""
        space = self._spaces.get(space_id)
        if space is None or space.has_cellar:
            return False
        space.floors[CELLAR_FLOOR] = self._new_floor(
            space.width, space.height, self.config.cellar_surface
        )
        logger.info("Cellar created in %s", space_id)
        return True

    def maybe_remove_cellar(self, space_id: str) -> bool:
        """Drop floor -1 once nothing on floor 0 unlocks it. Returns True if removed."""
        space = self._spaces.get(space_id)
        if space is None or not space.has_cellar or space.cellar_unlocked:
            return False
        del space.floors[CELLAR_FLOOR]
        logger.info("Cellar removed from %s", space_id)
        return True

    # ── Snapshots ─────────────────────────────────────────────────────

    def as_mapping(self) -> dict[str, NestedSpace]:
        """Live spaces keyed by id (a new dict, same objects)."""
        return dict(self._spaces)

    def load_spaces(self, spaces: dict[str, NestedSpace]) -> None:
        """Replace all spaces. The registry takes ownership of the objects."""
        self._spaces = dict(spaces)

    # ── Internals ─────────────────────────────────────────────────────

    def _unique_id(self, base: str) -> str:
        if base not in self._spaces:
            return base
        n = 2
        while f"{base}_{n}" in self._spaces:
            n += 1
        return f"{base}_{n}"

    @staticmethod
    def _new_floor(width: int, height: int, surface) -> Floor:
        layer = SurfaceLayer()
        layer.fill(width, height, surface)
        return Floor(grid=OccupancyGrid(width, height), surface=layer)
