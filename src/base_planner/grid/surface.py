"""Per-cell surface paint, independent of entity occupancy."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from base_planner.models.document import SurfaceRecord, cell_key, parse_cell_key
from base_planner.models.geometry import Cell
from base_planner.models.surfaces import SurfaceType


class SurfaceLayer:
    """Mapping from (x, y) to the surface type painted there.

    At most one type per cell. The layer is unbounded; callers clip shapes
    to their grid before painting.
    """

    def __init__(self, cells: Mapping[tuple[int, int], SurfaceType] | None = None) -> None:
        self._cells: dict[tuple[int, int], SurfaceType] = dict(cells or {})

    def place(self, x: int, y: int, surface: SurfaceType) -> None:
        self._cells[(x, y)] = surface

    def remove(self, x: int, y: int) -> bool:
        """Erase a cell. Returns False if it was already bare."""
        return self._cells.pop((x, y), None) is not None

    def get(self, x: int, y: int) -> SurfaceType | None:
        return self._cells.get((x, y))

    def has(self, x: int, y: int) -> bool:
        return (x, y) in self._cells

    def clear(self) -> None:
        self._cells.clear()

    def fill(self, width: int, height: int, surface: SurfaceType) -> None:
        """Paint every cell of [0, width) × [0, height)."""
        for x in range(width):
            for y in range(height):
                self._cells[(x, y)] = surface

    def place_cells(self, cells: Iterable[Cell], surface: SurfaceType) -> int:
        """Paint a batch of cells. Returns how many were painted."""
        count = 0
        for cell in cells:
            self._cells[(cell.x, cell.y)] = surface
            count += 1
        return count

    def remove_cells(self, cells: Iterable[Cell]) -> int:
        """Erase a batch of cells. Returns how many actually had paint."""
        return sum(1 for cell in cells if self.remove(cell.x, cell.y))

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(list(self._cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SurfaceLayer):
            return NotImplemented
        return self._cells == other._cells

    def items(self) -> list[tuple[tuple[int, int], SurfaceType]]:
        """All painted cells, in paint order."""
        return list(self._cells.items())

    def copy_cells(self) -> dict[tuple[int, int], SurfaceType]:
        """Independent copy of the cell map. Surface types are frozen and shared."""
        return dict(self._cells)

    def load_cells(self, cells: Mapping[tuple[int, int], SurfaceType]) -> None:
        """Replace the whole layer."""
        self._cells = dict(cells)

    # ── Document form ─────────────────────────────────────────────────

    def to_records(self) -> dict[str, SurfaceRecord]:
        """Direct coordinate → record dump, keyed 'x,y'."""
        return {
            cell_key(x, y): SurfaceRecord(
                name=surface.name, category=surface.category, image=surface.image
            )
            for (x, y), surface in self._cells.items()
        }

    @classmethod
    def from_records(cls, records: Mapping[str, SurfaceRecord]) -> SurfaceLayer:
        """Inverse of to_records. Raises ValueError on a malformed key."""
        cells: dict[tuple[int, int], SurfaceType] = {}
        for key, record in records.items():
            cells[parse_cell_key(key)] = SurfaceType(
                name=record.name, category=record.category, image=record.image
            )
        return cls(cells)
