"""Nested spaces (interiors) and their floors."""

from base_planner.interiors.registry import (
    CELLAR_FLOOR,
    GROUND_FLOOR,
    Floor,
    NestedSpace,
    NestedSpaceRegistry,
)

__all__ = [
    "CELLAR_FLOOR",
    "GROUND_FLOOR",
    "Floor",
    "NestedSpace",
    "NestedSpaceRegistry",
]
