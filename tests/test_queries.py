"""Tests for read-only plan queries."""

from base_planner.coordinator import PlacementCoordinator
from base_planner.queries.summary import describe_entity, describe_interior, plan_summary


class TestPlanSummary:
    def test_counts(self):
        p = PlacementCoordinator()
        p.place("Chest", 0, 0)
        p.place("Chest", 1, 0)
        p.place("Crucible", 5, 5)
        p.paint((0, 0), (1, 1), "Granite")
        summary = plan_summary(p)
        assert summary["grid"] == {"width": 50, "height": 50}
        assert summary["entities"] == 3
        assert summary["by_kind"] == {"Chest": 2, "Crucible": 1}
        assert summary["by_category"] == {"storage": 2, "crafting": 1}
        assert summary["surfaces"] == {"Granite": 4}
        assert summary["history"]["can_undo"] is True
        assert summary["history"]["can_redo"] is False

    def test_interiors(self):
        p = PlacementCoordinator()
        cabin = p.place("Log Cabin", 0, 0)
        p.open_interior(cabin.interior_id)
        p.place("Cellar Door", 0, 0)
        (info,) = plan_summary(p)["interiors"]
        assert info["floors"] == [-1, 0]
        assert info["has_cellar"] is True
        assert info["contents"]["0"] == {"entities": 1, "surface_cells": 100}


class TestDescribe:
    def test_entity(self):
        p = PlacementCoordinator()
        e = p.place("Palisade", 2, 3)
        info = describe_entity(e)
        assert info["id"] == "Palisade_2_3"
        assert info["orientation"] == "corner"
        assert "interior_id" not in info

    def test_interior(self):
        p = PlacementCoordinator()
        cabin = p.place("Timber House", 0, 0)
        info = describe_interior(p.registry.get(cabin.interior_id))
        assert info["owner"] == "Timber House_0_0"
        assert (info["width"], info["height"]) == (14, 14)
        assert info["floors"] == [0, 1]
