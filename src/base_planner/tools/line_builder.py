"""Line-building tool: turns a drag gesture into an oriented run of cells.

States:
    IDLE     no start point
    DRAWING  start point set, direction possibly still unlocked

The direction locks on the first update that moves off the start cell and
stays locked for the rest of the segment. Every update recomputes the run
from the start point, so dragging back toward the start shrinks it.

Junction detection needs to know what is already on the grid. The builder
takes a probe callable returning the orientation of a line-built entity
at a cell (or None), so it stays independent of any particular grid.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from base_planner.models.entities import LineCell, Orientation
from base_planner.models.geometry import Cell

logger = logging.getLogger(__name__)

OrientationProbe = Callable[[int, int], Orientation | None]


class LineState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"


class LineBuilder:
    """Stateful line tool with corner inference and multi-segment runs."""

    def __init__(self, probe: OrientationProbe | None = None) -> None:
        self._probe = probe
        self._state = LineState.IDLE
        self._start: Cell | None = None
        self._direction: Orientation | None = None
        self._run: list[LineCell] = []
        self._segments: list[list[LineCell]] = []

    # ── State ─────────────────────────────────────────────────────────

    @property
    def state(self) -> LineState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == LineState.DRAWING

    @property
    def start_point(self) -> Cell | None:
        return self._start

    @property
    def direction(self) -> Orientation | None:
        """Locked axis of the current segment, or None while unlocked."""
        return self._direction

    @property
    def current_run(self) -> list[LineCell]:
        return list(self._run)

    @property
    def cells(self) -> list[LineCell]:
        """Preview of everything drawn so far, all segments merged."""
        return _merge([*self._segments, self._run])

    # ── Gesture ───────────────────────────────────────────────────────

    def start(self, point: Cell | tuple[int, int]) -> None:
        """Begin a new line at `point`, discarding any unfinished one."""
        start = Cell.of(point)
        self._state = LineState.DRAWING
        self._start = start
        self._direction = None
        self._segments = []
        self._run = [LineCell(x=start.x, y=start.y, orientation=Orientation.CORNER)]

    def update(self, point: Cell | tuple[int, int]) -> list[LineCell]:
        """Recompute the current segment toward `point`.

        Returns the current segment's cells. No-op while idle.
        """
        if self._start is None:
            return []
        current = Cell.of(point)
        dx = current.x - self._start.x
        dy = current.y - self._start.y

        if self._direction is None and (dx or dy):
            self._direction = (
                Orientation.HORIZONTAL if abs(dx) >= abs(dy) else Orientation.VERTICAL
            )

        self._run = self._compute_run(self._start, current)
        return list(self._run)

    def extend(self, point: Cell | tuple[int, int]) -> bool:
        """Start a new segment from the current end cell.

        Only accepted when `point` is that end cell and the segment has
        actually left its start. The junction becomes a corner post.
        """
        if self._start is None or len(self._run) < 2:
            return False
        end = self._run[-1].cell
        if Cell.of(point) != end:
            return False
        self._segments.append(self._run)
        self._start = end
        self._direction = None
        self._run = [LineCell(x=end.x, y=end.y, orientation=Orientation.CORNER)]
        logger.debug("Line extended from (%d, %d)", end.x, end.y)
        return True

    def complete(self) -> list[LineCell]:
        """Finish the line. Returns every cell once, corner winning ties."""
        if self._start is None:
            return []
        cells = self.cells
        self._reset()
        return cells

    def cancel(self) -> None:
        """Discard the line without returning anything."""
        self._reset()

    # ── Internals ─────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._state = LineState.IDLE
        self._start = None
        self._direction = None
        self._run = []
        self._segments = []

    def _compute_run(self, start: Cell, current: Cell) -> list[LineCell]:
        direction = self._direction
        if direction is None:
            return [LineCell(x=start.x, y=start.y, orientation=Orientation.CORNER)]

        if direction == Orientation.HORIZONTAL:
            step = 1 if current.x >= start.x else -1
            coords = [(x, start.y) for x in range(start.x, current.x + step, step)]
        else:
            step = 1 if current.y >= start.y else -1
            coords = [(start.x, y) for y in range(start.y, current.y + step, step)]

        if len(coords) == 1:
            x, y = coords[0]
            return [LineCell(x=x, y=y, orientation=Orientation.CORNER)]

        run = [LineCell(x=x, y=y, orientation=direction) for x, y in coords]
        run[0] = LineCell(x=start.x, y=start.y, orientation=Orientation.CORNER)

        last = run[-1]
        if self._probe is not None:
            existing = self._probe(last.x, last.y)
            if existing is not None and existing != direction:
                run[-1] = LineCell(x=last.x, y=last.y, orientation=Orientation.CORNER)
        return run


def _merge(segments: list[list[LineCell]]) -> list[LineCell]:
    """Union of segments in drawing order, one cell per coordinate."""
    merged: dict[tuple[int, int], LineCell] = {}
    for segment in segments:
        for cell in segment:
            key = (cell.x, cell.y)
            previous = merged.get(key)
            if previous is None or cell.orientation == Orientation.CORNER:
                merged[key] = cell
    return list(merged.values())
