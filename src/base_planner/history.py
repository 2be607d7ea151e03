"""Snapshot-based undo/redo.

A linear log of immutable snapshots with a cursor. Saving after an undo
discards the redo branch. The log is capped; when it overflows, the
oldest snapshot is dropped and the cursor keeps pointing at the same
logical entry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from base_planner.config import HISTORY_LIMIT
from base_planner.interiors.registry import NestedSpace
from base_planner.models.entities import Entity
from base_planner.models.surfaces import SurfaceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistorySnapshot:
    """Point-in-time copy of the plan's state.

    Holds the outer grid's entities and surface cells, the outer grid
    size, and every nested space. Nothing here is shared with live state.
    """

    entities: tuple[Entity, ...]
    surfaces: Mapping[tuple[int, int], SurfaceType]
    interiors: Mapping[str, NestedSpace] = field(default_factory=dict)
    grid_size: tuple[int, int] | None = None

    @classmethod
    def capture(
        cls,
        entities: Iterable[Entity],
        surfaces: Mapping[tuple[int, int], SurfaceType],
        interiors: Mapping[str, NestedSpace] | None = None,
        grid_size: tuple[int, int] | None = None,
    ) -> HistorySnapshot:
        """Deep-copy live state into a new snapshot."""
        return cls(
            entities=tuple(e.clone() for e in entities),
            surfaces=dict(surfaces),
            interiors={sid: s.copy() for sid, s in (interiors or {}).items()},
            grid_size=grid_size,
        )

    def copy(self) -> HistorySnapshot:
        """An independent copy, safe to load into live state."""
        return HistorySnapshot.capture(
            self.entities, self.surfaces, self.interiors, self.grid_size
        )


class HistoryManager:
    """Capped undo/redo log."""

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._log: list[HistorySnapshot] = []
        self._cursor = -1

    def save(
        self,
        entities: Iterable[Entity],
        surfaces: Mapping[tuple[int, int], SurfaceType],
        interiors: Mapping[str, NestedSpace] | None = None,
        grid_size: tuple[int, int] | None = None,
    ) -> None:
        """Append a deep copy of the given state after the cursor."""
        snapshot = HistorySnapshot.capture(entities, surfaces, interiors, grid_size)
        del self._log[self._cursor + 1:]
        self._log.append(snapshot)
        if len(self._log) > self.limit:
            del self._log[0]
        self._cursor = len(self._log) - 1
        logger.debug("History saved (%d/%d)", len(self._log), self.limit)

    def undo(self) -> HistorySnapshot | None:
        """Step back. Returns a copy of the previous snapshot, or None at the start."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._log[self._cursor].copy()

    def redo(self) -> HistorySnapshot | None:
        """Step forward. Returns a copy of the next snapshot, or None at the end."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._log[self._cursor].copy()

    def clear(self) -> None:
        self._log = []
        self._cursor = -1

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._log) - 1

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> HistorySnapshot | None:
        if self._cursor < 0:
            return None
        return self._log[self._cursor]

    def __len__(self) -> int:
        return len(self._log)
