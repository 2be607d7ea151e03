"""Tests for nested spaces and the registry."""

import pytest

from base_planner.config import CELLAR_FLOOR_SURFACE, INTERIOR_FLOOR_SURFACE
from base_planner.interiors.registry import CELLAR_FLOOR, NestedSpaceRegistry
from base_planner.models.entities import Entity


def cellar_door(x=1, y=1) -> Entity:
    return Entity(kind="Cellar Door", x=x, y=y, width=1, height=1, unlocks_cellar=True)


class TestCreate:
    def test_floors_prefilled(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("Log Cabin_6_6", 4, 3, floor_count=2)
        space = reg.get(sid)
        assert space.floor_indices == [0, 1]
        for index in (0, 1):
            surface = space.get_surface(index)
            assert len(surface) == 12
            assert surface.get(3, 2) == INTERIOR_FLOOR_SURFACE
            assert space.get_grid(index).width == 4

    def test_id_from_owner(self):
        reg = NestedSpaceRegistry()
        assert reg.create("Log Cabin_6_6", 4, 4) == "interior_Log Cabin_6_6"

    def test_id_collision_gets_suffix(self):
        reg = NestedSpaceRegistry()
        reg.create("A_0_0", 2, 2)
        assert reg.create("A_0_0", 2, 2) == "interior_A_0_0_2"

    def test_explicit_id_must_be_new(self):
        reg = NestedSpaceRegistry()
        reg.create("A_0_0", 2, 2, space_id="x")
        with pytest.raises(ValueError):
            reg.create("B_0_0", 2, 2, space_id="x")

    def test_floor_count_positive(self):
        with pytest.raises(ValueError):
            NestedSpaceRegistry().create("A_0_0", 2, 2, floor_count=0)


class TestLookup:
    def test_get_by_owner_and_remove(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 2, 2)
        assert reg.get_by_owner("A_0_0").id == sid
        assert reg.remove("A_0_0")
        assert reg.get(sid) is None
        assert not reg.remove("A_0_0")

    def test_remove_space_by_id(self):
        reg = NestedSpaceRegistry()
        first = reg.create("A_0_0", 2, 2, space_id="first")
        second = reg.create("A_0_0", 2, 2)
        assert reg.remove_space(second)
        assert reg.get(first) is not None
        assert not reg.remove_space(second)

    def test_get_all_floors_unknown(self):
        assert NestedSpaceRegistry().get_all_floors("nope") == []

    def test_reassign_owner(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 2, 2)
        assert reg.reassign_owner(sid, "A_5_5")
        assert reg.get_by_owner("A_5_5").id == sid
        assert reg.get_by_owner("A_0_0") is None

    def test_locate(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 5, 5, floor_count=2)
        door = cellar_door()
        reg.get(sid).get_grid(1).add_entity(door)
        space, floor = reg.locate(door)
        assert (space.id, floor) == (sid, 1)
        assert reg.locate(cellar_door()) is None


class TestCellar:
    def test_ensure_and_remove(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 3, 3)
        space = reg.get(sid)
        door = cellar_door()
        space.get_grid(0).add_entity(door)

        assert reg.ensure_cellar(sid)
        assert not reg.ensure_cellar(sid)
        assert reg.get_all_floors(sid) == [-1, 0]
        assert space.get_surface(CELLAR_FLOOR).get(0, 0) == CELLAR_FLOOR_SURFACE
        assert len(space.get_surface(CELLAR_FLOOR)) == 9

        # still unlocked: nothing happens
        assert not reg.maybe_remove_cellar(sid)

        space.get_grid(0).remove_entity(door)
        assert reg.maybe_remove_cellar(sid)
        assert not space.has_cellar

    def test_unlocker_on_upper_floor_does_not_count(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 3, 3, floor_count=2)
        space = reg.get(sid)
        space.get_grid(1).add_entity(cellar_door())
        assert not space.cellar_unlocked


class TestCopy:
    def test_copy_is_deep(self):
        reg = NestedSpaceRegistry()
        sid = reg.create("A_0_0", 3, 3)
        space = reg.get(sid)
        door = cellar_door()
        space.get_grid(0).add_entity(door)

        clone = space.copy()
        door.x = 2
        space.get_surface(0).clear()
        assert clone.get_grid(0).entities[0].x == 1
        assert len(clone.get_surface(0)) == 9
