"""Tests for plan validation."""

from base_planner.coordinator import PlacementCoordinator
from base_planner.models.entities import Entity, StructureRole
from base_planner.validators.plan import (
    validate_bounds,
    validate_cellars,
    validate_interior_links,
    validate_overlaps,
    validate_plan,
)


def clean_plan() -> PlacementCoordinator:
    p = PlacementCoordinator()
    p.start_line("Palisade", (0, 5))
    p.update_line((9, 5))
    p.complete_line()
    p.remove_many([p.entity_at(x, 5) for x in (4, 5)])
    p.place("Palisade Gate", 3, 5)
    cabin = p.place("Log Cabin", 20, 20)
    p.open_interior(cabin.interior_id)
    p.place("Cellar Door", 0, 0)
    p.close_interior()
    return p


class TestValidatePlan:
    def test_clean_plan(self):
        assert validate_plan(clean_plan()) == []

    def test_overlap_reported(self):
        p = PlacementCoordinator()
        p.grid.load_entities([
            Entity(kind="Chest", x=0, y=0, width=2, height=2),
            Entity(kind="Chest", x=1, y=1, width=2, height=2),
        ])
        errors = validate_overlaps(p.grid)
        assert len(errors) == 1
        assert errors[0].severity == "error"

    def test_gate_end_overlap_allowed(self):
        p = PlacementCoordinator()
        p.grid.load_entities([
            Entity(kind="Palisade", x=0, y=0, width=1, height=1, role=StructureRole.WALL),
            Entity(kind="Palisade Gate", x=0, y=0, width=4, height=1, role=StructureRole.GATE),
            Entity(kind="Palisade", x=2, y=0, width=1, height=1, role=StructureRole.WALL),
        ])
        errors = validate_overlaps(p.grid)
        assert len(errors) == 1
        assert "Palisade_2_0" in errors[0].message

    def test_out_of_bounds(self):
        p = PlacementCoordinator()
        p.grid.load_entities([Entity(kind="Chest", x=49, y=0, width=2, height=1)])
        assert len(validate_bounds(p.grid)) == 1

    def test_dangling_link(self):
        p = PlacementCoordinator()
        cabin = p.place("Log Cabin", 0, 0)
        cabin.interior_id = "missing"
        errors = validate_interior_links(p)
        # the space itself still has its owner on the grid
        assert [e.severity for e in errors] == ["error"]

    def test_orphan_space(self):
        p = PlacementCoordinator()
        cabin = p.place("Log Cabin", 0, 0)
        p.grid.remove_entity(cabin)
        errors = validate_interior_links(p)
        assert [e.element_type for e in errors] == ["NestedSpace"]
        assert errors[0].severity == "warning"

    def test_cellar_mismatch(self):
        p = clean_plan()
        (space,) = p.interiors()
        door = space.get_grid(0).entities[0]
        space.get_grid(0).remove_entity(door)
        errors = validate_cellars(p)
        assert len(errors) == 1
        assert "no" in errors[0].message or "nothing" in errors[0].message

    def test_checks_interior_floors(self):
        p = clean_plan()
        (space,) = p.interiors()
        space.get_grid(0).load_entities(
            space.get_grid(0).entities + [Entity(kind="Chest", x=0, y=0, width=1, height=1)]
        )
        assert any("floor 0" in e.message for e in validate_plan(p))
