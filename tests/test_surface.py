"""Tests for the surface layer."""

import pytest

from base_planner.grid.surface import SurfaceLayer
from base_planner.models.document import SurfaceRecord
from base_planner.models.geometry import Cell
from base_planner.models.surfaces import SurfaceCategory, SurfaceType

GRANITE = SurfaceType(name="Granite", category=SurfaceCategory.STONE, image="granite.png")
MARBLE = SurfaceType(name="Marble", category=SurfaceCategory.SPECIAL)


class TestSurfaceLayer:
    def test_place_and_get(self):
        layer = SurfaceLayer()
        layer.place(1, 2, GRANITE)
        assert layer.get(1, 2) == GRANITE
        assert layer.has(1, 2)
        assert layer.get(2, 1) is None

    def test_one_type_per_cell(self):
        layer = SurfaceLayer()
        layer.place(0, 0, GRANITE)
        layer.place(0, 0, MARBLE)
        assert layer.get(0, 0) == MARBLE
        assert len(layer) == 1

    def test_remove(self):
        layer = SurfaceLayer()
        layer.place(0, 0, GRANITE)
        assert layer.remove(0, 0)
        assert not layer.remove(0, 0)
        assert len(layer) == 0

    def test_clear(self):
        layer = SurfaceLayer()
        layer.fill(3, 3, GRANITE)
        assert len(layer) == 9
        layer.clear()
        assert len(layer) == 0

    def test_batch_edit(self):
        layer = SurfaceLayer()
        cells = [Cell(x=0, y=0), Cell(x=1, y=0)]
        assert layer.place_cells(cells, GRANITE) == 2
        assert layer.remove_cells([Cell(x=1, y=0), Cell(x=5, y=5)]) == 1

    def test_copy_is_independent(self):
        layer = SurfaceLayer()
        layer.place(0, 0, GRANITE)
        cells = layer.copy_cells()
        layer.place(1, 1, MARBLE)
        assert (1, 1) not in cells


class TestSurfaceRecords:
    def test_dump_keys(self):
        layer = SurfaceLayer()
        layer.place(3, 7, GRANITE)
        records = layer.to_records()
        assert records == {
            "3,7": SurfaceRecord(name="Granite", category=SurfaceCategory.STONE, image="granite.png")
        }

    def test_round_trip(self):
        layer = SurfaceLayer()
        layer.place(-1, 4, GRANITE)
        layer.place(2, 2, MARBLE)
        restored = SurfaceLayer.from_records(layer.to_records())
        assert restored.items() == layer.items()

    def test_bad_key(self):
        with pytest.raises(ValueError):
            SurfaceLayer.from_records({"3;7": SurfaceRecord(name="Granite", category="stone")})
