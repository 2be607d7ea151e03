"""Plan validation.

- bounds: every entity inside its grid
- overlaps: no overlap except gate ends over walls
- interior links: entity links resolve, spaces have owners
- cellars: floor -1 present exactly when unlocked
"""

from base_planner.validators.plan import (
    ValidationError,
    validate_bounds,
    validate_cellars,
    validate_interior_links,
    validate_overlaps,
    validate_plan,
)

__all__ = [
    "ValidationError",
    "validate_bounds",
    "validate_cellars",
    "validate_interior_links",
    "validate_overlaps",
    "validate_plan",
]
