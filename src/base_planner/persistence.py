"""Conversion between persisted plan documents and live planner state.

Loading is all-or-nothing: build_plan() assembles a complete new state
(outer grid, outer surface, nested spaces) without touching anything
live, and only then does the coordinator swap it in. Any malformed input
raises LoadFormatError before that point.

On load:
- a legacy single `gridSize` becomes width = height = gridSize
- legacy interiors (flat items/paving) become floor 0
- interior-capable items with no usable interior link get a space
  synthesized as `interior_{kind}_{x}_{y}`
- a `-1` floor entry always comes back as the cellar; a cellar is added
  when an unlocker sits on floor 0 and the document has none
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from base_planner.config import PlannerConfig
from base_planner.errors import LoadFormatError
from base_planner.grid.occupancy import OccupancyGrid
from base_planner.grid.surface import SurfaceLayer
from base_planner.interiors.registry import (
    GROUND_FLOOR,
    Floor,
    NestedSpace,
    NestedSpaceRegistry,
)
from base_planner.models.catalog import Catalog
from base_planner.models.document import (
    EntityRecord,
    FloorRecord,
    InteriorRecord,
    PlanDocument,
)
from base_planner.models.entities import Entity, StructureRole

logger = logging.getLogger(__name__)


@dataclass
class LoadedPlan:
    """A fully built plan state, not yet attached to any coordinator."""

    grid: OccupancyGrid
    surface: SurfaceLayer
    registry: NestedSpaceRegistry
    warnings: list[str] = field(default_factory=list)


# ── Parsing ───────────────────────────────────────────────────────────


def parse_document(data: str | bytes | Mapping[str, Any]) -> PlanDocument:
    """Validate raw JSON text or a decoded mapping into a PlanDocument."""
    try:
        if isinstance(data, (str, bytes)):
            return PlanDocument.model_validate_json(data)
        return PlanDocument.model_validate(data)
    except ValidationError as e:
        raise LoadFormatError(f"Invalid plan document: {e}") from e


# ── Records ───────────────────────────────────────────────────────────


def entity_from_record(record: EntityRecord, catalog: Catalog) -> Entity:
    """Rebuild an entity. Policy flags the catalog knows about are OR-ed in."""
    spec = catalog.find_kind(record.name)
    return Entity(
        kind=record.name,
        category=record.category,
        x=record.x,
        y=record.y,
        width=record.width,
        height=record.height,
        color=record.color,
        image=record.image,
        image_url=record.image_url,
        orientation=record.orientation,
        rotation=record.rotation,
        uses_line_tool=record.uses_line_tool or bool(spec and spec.uses_line_tool),
        role=spec.role if spec else StructureRole.NONE,
        has_interior=record.has_interior or bool(spec and spec.has_interior),
        interior_id=record.interior_id,
        unlocks_cellar=record.unlocks_cellar or bool(spec and spec.unlocks_cellar),
        has_stairs=record.has_stairs or bool(spec and spec.has_stairs),
    )


def entity_to_record(entity: Entity) -> EntityRecord:
    return EntityRecord(
        name=entity.kind,
        category=entity.category,
        x=entity.x,
        y=entity.y,
        width=entity.width,
        height=entity.height,
        color=entity.color,
        image=entity.image,
        image_url=entity.image_url,
        orientation=entity.orientation,
        rotation=entity.rotation,
        uses_line_tool=entity.uses_line_tool,
        has_interior=entity.has_interior,
        interior_id=entity.interior_id,
        unlocks_cellar=entity.unlocks_cellar,
        has_stairs=entity.has_stairs,
    )


def _entities_within(
    records: list[EntityRecord],
    catalog: Catalog,
    width: int,
    height: int,
    where: str,
) -> list[Entity]:
    entities = [entity_from_record(r, catalog) for r in records]
    for entity in entities:
        if not entity.rect.within(width, height):
            raise LoadFormatError(
                f"Entity {entity.entity_id} lies outside the {width}x{height} {where}"
            )
    return entities


# ── Load ──────────────────────────────────────────────────────────────


def build_plan(
    document: PlanDocument,
    catalog: Catalog,
    config: PlannerConfig,
) -> LoadedPlan:
    """Assemble live state from a validated document."""
    width, height = document.resolved_size(config.grid_width, config.grid_height)
    entities = _entities_within(document.items, catalog, width, height, "grid")
    grid = OccupancyGrid(width, height, entities)
    surface = SurfaceLayer.from_records(document.paving)

    registry = NestedSpaceRegistry(config)
    for space_id, record in document.interiors.items():
        registry.add(_space_from_record(space_id, record, catalog, config))

    loaded = LoadedPlan(grid=grid, surface=surface, registry=registry)
    _reconcile_interior_links(loaded, catalog)
    _reconcile_cellars(loaded)
    return loaded


def _space_from_record(
    space_id: str,
    record: InteriorRecord,
    catalog: Catalog,
    config: PlannerConfig,
) -> NestedSpace:
    floors: dict[int, Floor] = {}
    for index, floor_record in record.floor_records().items():
        items = _entities_within(
            floor_record.items, catalog, record.width, record.height,
            f"interior {space_id} floor {index}",
        )
        floors[index] = Floor(
            grid=OccupancyGrid(record.width, record.height, items),
            surface=SurfaceLayer.from_records(floor_record.paving),
        )

    for index in range(record.floors):
        if index not in floors:
            layer = SurfaceLayer()
            layer.fill(record.width, record.height, config.interior_surface)
            floors[index] = Floor(
                grid=OccupancyGrid(record.width, record.height), surface=layer
            )

    return NestedSpace(
        id=space_id,
        owner_id=record.building_id or "",
        width=record.width,
        height=record.height,
        floor_count=record.floors,
        floors=floors,
    )


def _reconcile_interior_links(loaded: LoadedPlan, catalog: Catalog) -> None:
    registry = loaded.registry
    for entity in loaded.grid:
        if not entity.has_interior and not entity.interior_id:
            continue
        if entity.interior_id and entity.interior_id in registry:
            registry.get(entity.interior_id).owner_id = entity.entity_id
            continue

        space_id = f"interior_{entity.entity_id}"
        if space_id in registry:
            entity.interior_id = space_id
            registry.get(space_id).owner_id = entity.entity_id
            continue

        spec = catalog.find_kind(entity.kind)
        if spec is None or not spec.has_interior:
            message = (
                f"{entity.entity_id} declares an interior but kind '{entity.kind}' "
                f"has no interior size; left without one"
            )
            logger.warning(message)
            loaded.warnings.append(message)
            entity.interior_id = None
            continue

        registry.create(
            entity.entity_id,
            spec.interior_width,
            spec.interior_height,
            spec.default_floors,
            space_id=space_id,
        )
        entity.interior_id = space_id
        logger.info("Synthesized interior %s for legacy item", space_id)


def _reconcile_cellars(loaded: LoadedPlan) -> None:
    registry = loaded.registry
    for space in registry.spaces:
        if space.cellar_unlocked:
            registry.ensure_cellar(space.id)
        elif space.has_cellar:
            message = f"Kept cellar of {space.id} although nothing on floor 0 unlocks it"
            logger.warning(message)
            loaded.warnings.append(message)


# ── Save ──────────────────────────────────────────────────────────────


def dump_plan(
    grid: OccupancyGrid,
    surface: SurfaceLayer,
    registry: NestedSpaceRegistry,
) -> PlanDocument:
    """Snapshot live state as a PlanDocument."""
    return PlanDocument(
        grid_width=grid.width,
        grid_height=grid.height,
        items=[entity_to_record(e) for e in grid],
        paving=surface.to_records(),
        interiors={space.id: _space_to_record(space) for space in registry.spaces},
    )


def _space_to_record(space: NestedSpace) -> InteriorRecord:
    floor_data = {
        index: FloorRecord(
            items=[entity_to_record(e) for e in floor.grid],
            paving=floor.surface.to_records(),
        )
        for index, floor in sorted(space.floors.items())
    }
    ground = floor_data.get(GROUND_FLOOR, FloorRecord())
    # Flat floor-0 copy kept for readers of the legacy layout.
    return InteriorRecord(
        id=space.id,
        building_id=space.owner_id or None,
        width=space.width,
        height=space.height,
        floors=space.floor_count,
        items=ground.items,
        paving=ground.paving,
        floor_data=floor_data,
    )
