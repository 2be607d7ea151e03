"""Tests for the line-building tool."""

from base_planner.models.entities import LineCell, Orientation
from base_planner.tools.line_builder import LineBuilder, LineState

H, V, C = Orientation.HORIZONTAL, Orientation.VERTICAL, Orientation.CORNER


def as_tuples(cells):
    return [(c.x, c.y, c.orientation) for c in cells]


class TestStates:
    def test_idle_by_default(self):
        lb = LineBuilder()
        assert lb.state == LineState.IDLE
        assert not lb.is_active
        assert lb.update((3, 3)) == []
        assert lb.complete() == []

    def test_start_enters_drawing(self):
        lb = LineBuilder()
        lb.start((5, 5))
        assert lb.is_active
        assert lb.start_point.as_tuple() == (5, 5)
        assert lb.direction is None

    def test_cancel_resets(self):
        lb = LineBuilder()
        lb.start((5, 5))
        lb.update((5, 9))
        lb.cancel()
        assert lb.state == LineState.IDLE
        assert lb.cells == []
        assert lb.complete() == []


class TestRuns:
    def test_vertical_run(self):
        lb = LineBuilder()
        lb.start((5, 5))
        lb.update((5, 9))
        assert as_tuples(lb.complete()) == [
            (5, 5, C), (5, 6, V), (5, 7, V), (5, 8, V), (5, 9, V),
        ]
        assert lb.state == LineState.IDLE

    def test_zero_movement_is_single_corner(self):
        lb = LineBuilder()
        lb.start((5, 5))
        lb.update((5, 5))
        assert as_tuples(lb.complete()) == [(5, 5, C)]

    def test_tie_locks_horizontal(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((2, 2))
        assert lb.direction == H
        assert as_tuples(lb.current_run) == [(0, 0, C), (1, 0, H), (2, 0, H)]

    def test_direction_stays_locked(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((3, 1))
        lb.update((1, 8))
        assert lb.direction == H
        assert [(c.x, c.y) for c in lb.current_run] == [(0, 0), (1, 0)]

    def test_drag_back_shrinks(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((6, 0))
        lb.update((2, 0))
        assert len(lb.current_run) == 3

    def test_back_to_start_is_single_corner(self):
        lb = LineBuilder()
        lb.start((4, 4))
        lb.update((4, 7))
        lb.update((4, 4))
        assert as_tuples(lb.current_run) == [(4, 4, C)]

    def test_negative_direction(self):
        lb = LineBuilder()
        lb.start((5, 5))
        lb.update((2, 5))
        assert as_tuples(lb.current_run) == [(5, 5, C), (4, 5, H), (3, 5, H), (2, 5, H)]


class TestCornerInference:
    def test_end_on_other_orientation_becomes_corner(self):
        existing = {(5, 9): H}
        lb = LineBuilder(probe=lambda x, y: existing.get((x, y)))
        lb.start((5, 5))
        lb.update((5, 9))
        assert lb.current_run[-1] == LineCell(x=5, y=9, orientation=C)

    def test_end_on_same_orientation_stays(self):
        existing = {(5, 9): V}
        lb = LineBuilder(probe=lambda x, y: existing.get((x, y)))
        lb.start((5, 5))
        lb.update((5, 9))
        assert lb.current_run[-1].orientation == V

    def test_only_last_cell_is_probed(self):
        existing = {(5, 7): H}
        lb = LineBuilder(probe=lambda x, y: existing.get((x, y)))
        lb.start((5, 5))
        lb.update((5, 9))
        assert lb.current_run[2].orientation == V


class TestExtend:
    def test_multi_segment(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((3, 0))
        assert lb.extend((3, 0))
        lb.update((3, 2))
        cells = lb.complete()
        assert as_tuples(cells) == [
            (0, 0, C), (1, 0, H), (2, 0, H), (3, 0, C), (3, 1, V), (3, 2, V),
        ]

    def test_extend_needs_end_cell(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((3, 0))
        assert not lb.extend((2, 0))

    def test_extend_needs_movement(self):
        lb = LineBuilder()
        lb.start((0, 0))
        assert not lb.extend((0, 0))

    def test_new_segment_relocks_direction(self):
        lb = LineBuilder()
        lb.start((0, 0))
        lb.update((3, 0))
        lb.extend((3, 0))
        assert lb.direction is None
        lb.update((3, 4))
        assert lb.direction == V
