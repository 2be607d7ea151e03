"""Read-only plan queries.

- summary: plan overview, entity/interior descriptions, surface counts
"""

from base_planner.queries.summary import (
    describe_entity,
    describe_interior,
    entity_counts,
    plan_summary,
    surface_counts,
)

__all__ = [
    "describe_entity",
    "describe_interior",
    "entity_counts",
    "plan_summary",
    "surface_counts",
]
