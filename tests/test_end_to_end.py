"""End-to-end integration tests.

Runs the walled homestead walkthrough:
palisade line → gate → cabin with cellar → path → validate → save → load
"""

import importlib.util
import json
from pathlib import Path

import pytest

from base_planner.coordinator import PlacementCoordinator
from base_planner.models.entities import Orientation
from base_planner.queries.summary import plan_summary
from base_planner.validators.plan import validate_plan

EXAMPLE = Path(__file__).parent.parent / "examples" / "walled_homestead.py"


def _load_example():
    spec = importlib.util.spec_from_file_location("walled_homestead", EXAMPLE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def homestead() -> PlacementCoordinator:
    return _load_example().build()


class TestWalledHomestead:
    def test_validates_clean(self, homestead):
        assert validate_plan(homestead) == []

    def test_wall_ring(self, homestead):
        posts = [e for e in homestead.entities() if e.kind == "Palisade"]
        # 76 perimeter cells minus the two that made way for the gate
        assert len(posts) == 74
        corners = {(e.x, e.y) for e in posts if e.orientation == Orientation.CORNER}
        assert {(2, 2), (21, 2), (21, 21), (2, 21)} <= corners

    def test_gate_in_wall(self, homestead):
        gate = homestead.find_entity("Palisade Gate_10_21")
        assert (gate.x, gate.y, gate.width, gate.height) == (10, 21, 4, 1)
        assert homestead.entity_at(11, 21) is gate
        assert homestead.entity_at(12, 21) is gate
        # end cells overlap the wall posts
        assert homestead.entity_at(10, 21).kind == "Palisade"
        assert homestead.entity_at(13, 21).kind == "Palisade"

    def test_cabin_cellar(self, homestead):
        cabin = homestead.entity_at(8, 8)
        space = homestead.registry.get(cabin.interior_id)
        assert space.owner_id == cabin.entity_id
        assert space.floor_indices == [-1, 0]

    def test_path(self, homestead):
        summary = plan_summary(homestead)
        assert summary["surfaces"] == {"Granite": 20}

    def test_json_round_trip(self, homestead):
        text = homestead.to_json()
        loaded = PlacementCoordinator()
        assert loaded.load_document(text) == []
        assert json.loads(loaded.to_json()) == json.loads(text)
        assert validate_plan(loaded) == []
