"""Placement coordinator: the command surface of the planner.

Holds the outer grid and surface, the nested-space registry, the history
log and the line tool, and applies the policy the grids themselves don't
know about:

- gate-like kinds (catalog role `gate`) are placed with the overlap
  exemption
- interior-capable kinds placed on the outer grid get a nested space,
  removed again with their owner
- cellar-unlocking entities on floor 0 of a space create its cellar;
  removing the last one removes it
- every committed mutation is followed by exactly one history snapshot

Rejections (collision, out of bounds, history boundary) come back as
False / None. Unknown kinds and surface names raise ValueError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from base_planner.config import PlannerConfig
from base_planner.grid.occupancy import OccupancyGrid
from base_planner.grid.shapes import cells_for_shape
from base_planner.grid.surface import SurfaceLayer
from base_planner.history import HistoryManager, HistorySnapshot
from base_planner.interiors.registry import (
    CELLAR_FLOOR,
    GROUND_FLOOR,
    NestedSpace,
    NestedSpaceRegistry,
)
from base_planner.models.catalog import Catalog, KindSpec, default_catalog
from base_planner.models.document import PlanDocument
from base_planner.models.entities import (
    VALID_ROTATIONS,
    Entity,
    LineCell,
    Orientation,
    StructureRole,
)
from base_planner.models.geometry import Cell
from base_planner.models.surfaces import ShapeMode, SurfaceType
from base_planner.persistence import build_plan, dump_plan, parse_document
from base_planner.tools.line_builder import LineBuilder

logger = logging.getLogger(__name__)

Point = Cell | tuple[int, int]


@dataclass
class LinePlacementResult:
    """Per-cell outcome of placing a finished line."""

    placed: list[Entity] = field(default_factory=list)
    upgraded: list[Entity] = field(default_factory=list)
    removed: list[Entity] = field(default_factory=list)
    skipped: list[LineCell] = field(default_factory=list)
    unchanged: list[LineCell] = field(default_factory=list)
    failed: list[LineCell] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if at least one cell was handled successfully."""
        return bool(self.placed or self.upgraded or self.skipped or self.unchanged)


@dataclass
class _Location:
    grid: OccupancyGrid
    space: NestedSpace | None = None
    floor: int | None = None


class PlacementCoordinator:
    """Validates commands against the grids and commits them with history."""

    def __init__(
        self,
        catalog: Catalog | None = None,
        config: PlannerConfig | None = None,
    ) -> None:
        self.catalog = catalog or default_catalog()
        self.config = config or PlannerConfig()
        self.grid = OccupancyGrid(self.config.grid_width, self.config.grid_height)
        self.surface = SurfaceLayer()
        self.registry = NestedSpaceRegistry(self.config)
        self.history = HistoryManager(self.config.history_limit)
        self.line_builder = LineBuilder(probe=self._orientation_at)
        self._line_kind: str | None = None
        self._active_interior: str | None = None
        self._active_floor = GROUND_FLOOR
        self.reset_history()

    # ── Active context ────────────────────────────────────────────────

    @property
    def active_interior_id(self) -> str | None:
        return self._active_interior

    @property
    def active_floor(self) -> int:
        return self._active_floor

    @property
    def active_space(self) -> NestedSpace | None:
        if self._active_interior is None:
            return None
        return self.registry.get(self._active_interior)

    @property
    def active_grid(self) -> OccupancyGrid:
        """Grid that placement commands act on."""
        space = self.active_space
        if space is None:
            return self.grid
        grid = space.get_grid(self._active_floor)
        return grid if grid is not None else self.grid

    @property
    def active_surface(self) -> SurfaceLayer:
        space = self.active_space
        if space is None:
            return self.surface
        surface = space.get_surface(self._active_floor)
        return surface if surface is not None else self.surface

    def open_interior(self, space_id: str) -> bool:
        """Switch placement to floor 0 of a nested space."""
        if space_id not in self.registry:
            return False
        self.line_builder.cancel()
        self._active_interior = space_id
        self._active_floor = GROUND_FLOOR
        logger.debug("Opened interior %s", space_id)
        return True

    def close_interior(self) -> None:
        """Switch placement back to the outer grid."""
        self.line_builder.cancel()
        self._active_interior = None
        self._active_floor = GROUND_FLOOR

    def set_floor(self, floor: int) -> bool:
        """Switch to another existing floor of the open interior."""
        space = self.active_space
        if space is None or floor not in space.floors:
            return False
        self.line_builder.cancel()
        self._active_floor = floor
        return True

    # ── Entities ──────────────────────────────────────────────────────

    def place(self, kind: str, x: int, y: int, rotation: int = 0) -> Entity | None:
        """Place a catalog kind at (x, y) on the active grid.

        Returns the new entity, or None when the placement is rejected.
        """
        spec = self.catalog.require_kind(kind)
        if rotation not in VALID_ROTATIONS:
            raise ValueError(f"Rotation must be one of {VALID_ROTATIONS}, got {rotation}")
        entity = spec.create_entity(x, y, rotation)
        grid = self.active_grid
        if not grid.add_entity(entity, requires_exemption=_requires_exemption(entity)):
            logger.debug("Rejected %s at (%d, %d)", kind, x, y)
            return None
        self._after_add(entity, spec)
        self._commit(f"place {entity.entity_id}")
        return entity

    def remove(self, entity: Entity) -> bool:
        """Remove an entity from whichever grid owns it."""
        return self.remove_many([entity]) == 1

    def remove_many(self, entities: Iterable[Entity]) -> int:
        """Remove several entities with one snapshot. Returns how many were removed.

        Cellars of touched spaces are re-evaluated once, after the batch.
        """
        removed = 0
        touched: set[str] = set()
        for entity in entities:
            location = self._locate(entity)
            if location is None:
                continue
            location.grid.remove_entity(entity)
            self._drop_interior(entity, location)
            if location.space is not None and location.floor == GROUND_FLOOR:
                touched.add(location.space.id)
            removed += 1
        if not removed:
            return 0
        for space_id in touched:
            self._refresh_cellar(space_id)
        self._commit(f"remove {removed} entit{'y' if removed == 1 else 'ies'}")
        return removed

    def move(self, entity: Entity, x: int, y: int) -> bool:
        """Move an entity within its grid. The entity is untouched on rejection."""
        location = self._locate(entity)
        if location is None:
            return False
        old_id = entity.entity_id
        if not location.grid.move_entity(
            entity, x, y, requires_exemption=_requires_exemption(entity)
        ):
            return False
        if location.space is None and entity.interior_id:
            self.registry.reassign_owner(entity.interior_id, entity.entity_id)
        self._commit(f"move {old_id} -> {entity.entity_id}")
        return True

    def rotate(self, entity: Entity) -> bool:
        """Rotate an entity a quarter turn. The entity is untouched on rejection."""
        location = self._locate(entity)
        if location is None:
            return False
        if not location.grid.rotate_entity(
            entity, requires_exemption=_requires_exemption(entity)
        ):
            return False
        self._commit(f"rotate {entity.entity_id}")
        return True

    def resize_grid(self, width: int, height: int) -> bool:
        """Resize the outer grid, dropping surface cells that fall outside."""
        if not self.grid.resize(width, height):
            return False
        for x, y in self.surface:
            if not (0 <= x < width and 0 <= y < height):
                self.surface.remove(x, y)
        self._commit(f"resize {width}x{height}")
        return True

    # ── Surfaces ──────────────────────────────────────────────────────

    def paint(
        self,
        start: Point,
        end: Point,
        surface: str,
        mode: ShapeMode | str = ShapeMode.RECTANGLE,
    ) -> int:
        """Paint a shape on the active surface. Returns the number of cells painted."""
        surface_type = self.catalog.require_surface(surface)
        cells = self._clip(cells_for_shape(Cell.of(start), Cell.of(end), mode))
        if not cells:
            return 0
        self.active_surface.place_cells(cells, surface_type)
        self._commit(f"paint {len(cells)} cell(s) {surface_type.name}")
        return len(cells)

    def erase(
        self,
        start: Point,
        end: Point,
        mode: ShapeMode | str = ShapeMode.RECTANGLE,
    ) -> int:
        """Erase a shape from the active surface. Returns the number of cells cleared."""
        cells = self._clip(cells_for_shape(Cell.of(start), Cell.of(end), mode))
        removed = self.active_surface.remove_cells(cells)
        if removed:
            self._commit(f"erase {removed} cell(s)")
        return removed

    def clear_surfaces(self) -> None:
        """Remove every surface cell of the active surface."""
        self.active_surface.clear()
        self._commit("clear surfaces")

    def clear_all(self) -> None:
        """Empty the outer grid, its surface and every nested space."""
        self.line_builder.cancel()
        self._line_kind = None
        self.grid.clear()
        self.surface.clear()
        self.registry.clear()
        self._active_interior = None
        self._active_floor = GROUND_FLOOR
        self._commit("clear all")

    # ── Lines ─────────────────────────────────────────────────────────

    def start_line(self, kind: str, point: Point) -> None:
        """Begin drawing a line of a line-tool kind on the active grid."""
        spec = self.catalog.require_kind(kind)
        if not spec.uses_line_tool:
            raise ValueError(f"Kind '{kind}' is not built with the line tool")
        self._line_kind = kind
        self.line_builder.start(point)

    def update_line(self, point: Point) -> list[LineCell]:
        return self.line_builder.update(point)

    def extend_line(self, point: Point) -> bool:
        return self.line_builder.extend(point)

    def cancel_line(self) -> None:
        self.line_builder.cancel()
        self._line_kind = None

    def complete_line(self) -> LinePlacementResult:
        """Finish the current line and place its cells."""
        kind = self._line_kind
        cells = self.line_builder.complete()
        self._line_kind = None
        if kind is None or not cells:
            return LinePlacementResult()
        return self.place_line(kind, cells)

    def place_line(self, kind: str, cells: Iterable[LineCell]) -> LinePlacementResult:
        """Place oriented cells of a line-tool kind on the active grid.

        Per cell:
        - inside a gate: skipped, counts as success
        - same kind and orientation already there: unchanged
        - new corner over another line-built entity: that entity is replaced
        - other cell over a line-built entity of another orientation: the
          existing entity becomes a corner in place
        - anything else in the way: failed
        One snapshot is saved if any cell succeeded.
        """
        spec = self.catalog.require_kind(kind)
        grid = self.active_grid
        location = self._active_location()
        result = LinePlacementResult()

        for cell in cells:
            existing = grid.get_entity_at(cell.x, cell.y)
            if existing is None:
                entity = self._line_entity(spec, cell)
                if grid.add_entity(entity, requires_exemption=_requires_exemption(entity)):
                    self._after_add(entity, spec)
                    result.placed.append(entity)
                else:
                    result.failed.append(cell)
            elif existing.role == StructureRole.GATE:
                result.skipped.append(cell)
            elif not existing.is_linear:
                result.failed.append(cell)
            elif existing.kind == kind and existing.orientation == cell.orientation:
                result.unchanged.append(cell)
            elif cell.orientation == Orientation.CORNER:
                self._replace_with_corner(grid, existing, spec, cell, result)
            elif existing.orientation == Orientation.CORNER:
                result.unchanged.append(cell)
            elif existing.orientation != cell.orientation:
                existing.orientation = Orientation.CORNER
                result.upgraded.append(existing)
            else:
                result.failed.append(cell)

        if result.removed and location.space is not None and location.floor == GROUND_FLOOR:
            self._refresh_cellar(location.space.id)
        if result.ok:
            self._commit(
                f"line {kind}: {len(result.placed)} placed, "
                f"{len(result.upgraded)} upgraded, {len(result.failed)} failed"
            )
        return result

    def _replace_with_corner(
        self,
        grid: OccupancyGrid,
        existing: Entity,
        spec: KindSpec,
        cell: LineCell,
        result: LinePlacementResult,
    ) -> None:
        entity = self._line_entity(spec, cell)
        exempt = _requires_exemption(entity)
        if not grid.can_place(
            entity.x, entity.y, entity.width, entity.height,
            excluding=existing, requires_exemption=exempt,
        ):
            result.failed.append(cell)
            return
        grid.remove_entity(existing)
        grid.add_entity(entity, requires_exemption=exempt)
        self._after_add(entity, spec)
        result.removed.append(existing)
        result.placed.append(entity)

    @staticmethod
    def _line_entity(spec: KindSpec, cell: LineCell) -> Entity:
        entity = spec.create_entity(cell.x, cell.y)
        entity.orientation = cell.orientation
        return entity

    def _orientation_at(self, x: int, y: int) -> Orientation | None:
        entity = self.active_grid.get_entity_at(x, y)
        if entity is None or not entity.is_linear:
            return None
        return entity.orientation

    # ── History ───────────────────────────────────────────────────────

    def undo(self) -> bool:
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        return True

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def reset_history(self) -> None:
        """Make the current state the only history entry."""
        self.history.clear()
        self._save_snapshot()

    def _commit(self, description: str) -> None:
        logger.debug("Commit: %s", description)
        self._save_snapshot()

    def _save_snapshot(self) -> None:
        self.history.save(
            self.grid.entities,
            self.surface.copy_cells(),
            self.registry.as_mapping(),
            (self.grid.width, self.grid.height),
        )

    def _restore(self, snapshot: HistorySnapshot) -> None:
        self.line_builder.cancel()
        self._line_kind = None
        self.grid.load_entities(snapshot.entities)
        if snapshot.grid_size is not None:
            self.grid.resize(*snapshot.grid_size)
        self.surface.load_cells(snapshot.surfaces)
        self.registry.load_spaces(dict(snapshot.interiors))
        space = self.active_space
        if space is None:
            self._active_interior = None
            self._active_floor = GROUND_FLOOR
        elif self._active_floor not in space.floors:
            self._active_floor = GROUND_FLOOR

    # ── Documents ─────────────────────────────────────────────────────

    def load_document(self, data: str | bytes | Mapping[str, Any]) -> list[str]:
        """Replace the whole plan with a persisted document.

        Raises LoadFormatError without touching current state when the
        document is malformed. Returns any reconciliation warnings.
        """
        document = parse_document(data)
        loaded = build_plan(document, self.catalog, self.config)

        self.line_builder.cancel()
        self._line_kind = None
        self.grid = loaded.grid
        self.surface = loaded.surface
        self.registry = loaded.registry
        self._active_interior = None
        self._active_floor = GROUND_FLOOR
        self.reset_history()
        logger.info(
            "Loaded plan %dx%d: %d entities, %d surface cells, %d interiors",
            self.grid.width, self.grid.height, len(self.grid),
            len(self.surface), len(self.registry),
        )
        return loaded.warnings

    def to_document(self) -> PlanDocument:
        return dump_plan(self.grid, self.surface, self.registry)

    def to_json(self) -> str:
        return self.to_document().to_json()

    # ── Read-only queries ─────────────────────────────────────────────

    def entities(self) -> list[Entity]:
        """Entities of the active grid."""
        return self.active_grid.entities

    def surface_cells(self) -> list[tuple[tuple[int, int], SurfaceType]]:
        """Painted cells of the active surface."""
        return self.active_surface.items()

    def entity_at(self, x: int, y: int) -> Entity | None:
        return self.active_grid.get_entity_at(x, y)

    def entities_in_rect(self, p1: Point, p2: Point) -> list[Entity]:
        return self.active_grid.get_entities_in_rect(Cell.of(p1), Cell.of(p2))

    def find_entity(self, entity_id: str) -> Entity | None:
        """Entity of the active grid with this derived id."""
        return next(
            (e for e in self.active_grid if e.entity_id == entity_id), None
        )

    def interiors(self) -> list[NestedSpace]:
        return self.registry.spaces

    # ── Internals ─────────────────────────────────────────────────────

    def _active_location(self) -> _Location:
        space = self.active_space
        if space is None:
            return _Location(grid=self.grid)
        return _Location(grid=self.active_grid, space=space, floor=self._active_floor)

    def _locate(self, entity: Entity) -> _Location | None:
        if entity in self.grid:
            return _Location(grid=self.grid)
        found = self.registry.locate(entity)
        if found is None:
            return None
        space, floor = found
        return _Location(grid=space.floors[floor].grid, space=space, floor=floor)

    def _after_add(self, entity: Entity, spec: KindSpec) -> None:
        location = self._active_location()
        if location.space is None:
            if spec.has_interior:
                entity.interior_id = self.registry.create(
                    entity.entity_id,
                    spec.interior_width,
                    spec.interior_height,
                    spec.default_floors,
                )
        elif entity.unlocks_cellar and location.floor == GROUND_FLOOR:
            self.registry.ensure_cellar(location.space.id)

    def _drop_interior(self, entity: Entity, location: _Location) -> None:
        if location.space is not None or not entity.interior_id:
            return
        space_id = entity.interior_id
        self.registry.remove_space(space_id)
        if self._active_interior == space_id:
            self.close_interior()

    def _refresh_cellar(self, space_id: str) -> None:
        removed = self.registry.maybe_remove_cellar(space_id)
        if (
            removed
            and self._active_interior == space_id
            and self._active_floor == CELLAR_FLOOR
        ):
            self._active_floor = GROUND_FLOOR

    def _clip(self, cells: list[Cell]) -> list[Cell]:
        grid = self.active_grid
        return [c for c in cells if 0 <= c.x < grid.width and 0 <= c.y < grid.height]


def _requires_exemption(entity: Entity) -> bool:
    return entity.role == StructureRole.GATE
