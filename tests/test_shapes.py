"""Tests for shape generators."""

import pytest

from base_planner.grid.shapes import (
    cells_for_shape,
    circle_cells,
    line_cells,
    rectangle_cells,
)
from base_planner.models.geometry import Cell
from base_planner.models.surfaces import ShapeMode


def coords(cells):
    return [(c.x, c.y) for c in cells]


class TestLine:
    def test_horizontal(self):
        assert coords(line_cells(0, 0, 3, 0)) == [(0, 0), (1, 0), (2, 0), (3, 0)]

    def test_reversed(self):
        assert coords(line_cells(3, 0, 0, 0)) == [(3, 0), (2, 0), (1, 0), (0, 0)]

    def test_single_point(self):
        assert coords(line_cells(2, 2, 2, 2)) == [(2, 2)]

    def test_diagonal(self):
        assert coords(line_cells(0, 0, 3, 3)) == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_shallow_slope_is_connected(self):
        cells = line_cells(0, 0, 5, 2)
        assert cells[0] == Cell(x=0, y=0)
        assert cells[-1] == Cell(x=5, y=2)
        assert len(cells) == 6
        for a, b in zip(cells, cells[1:]):
            assert abs(a.x - b.x) <= 1 and abs(a.y - b.y) <= 1


class TestRectangle:
    def test_three_by_three(self):
        assert len(rectangle_cells(0, 0, 2, 2)) == 9

    def test_corner_order_does_not_matter(self):
        assert set(coords(rectangle_cells(2, 2, 0, 0))) == set(coords(rectangle_cells(0, 0, 2, 2)))

    def test_single_cell(self):
        assert coords(rectangle_cells(4, 4, 4, 4)) == [(4, 4)]


class TestCircle:
    def test_radius_two(self):
        cells = set(coords(circle_cells(5, 5, 5, 7)))
        expected = {
            (x, y)
            for x in range(3, 8)
            for y in range(3, 8)
            if (x - 5) ** 2 + (y - 5) ** 2 <= 4
        }
        assert len(cells) == 13
        assert cells == expected

    def test_zero_radius_is_center(self):
        assert coords(circle_cells(3, 3, 3, 3)) == [(3, 3)]

    def test_non_axis_edge_point(self):
        # radius sqrt(2): center plus the 8 neighbours
        assert len(circle_cells(0, 0, 1, 1)) == 9


class TestDispatch:
    def test_modes(self):
        start, end = Cell(x=0, y=0), Cell(x=3, y=0)
        assert len(cells_for_shape(start, end, ShapeMode.LINE)) == 4
        assert len(cells_for_shape(start, end, "rectangle")) == 4
        assert len(cells_for_shape(Cell(x=5, y=5), Cell(x=5, y=7), "circle")) == 13

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            cells_for_shape(Cell(x=0, y=0), Cell(x=1, y=1), "spiral")
