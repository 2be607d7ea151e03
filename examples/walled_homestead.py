"""Walled homestead: end-to-end planner walkthrough.

- palisade square drawn as one multi-segment line
- a gate set into the south wall (the two middle posts make way for it)
- a log cabin with a cellar door, so its interior gets a cellar
- a granite path from the gate to the cabin

Layout (top view, 24×24 grid):
   (2,2) ---------- (21,2)
     |   cabin        |
     |   (6,6)        |
     |                |
   (2,21) --gate--- (21,21)
"""

import sys
from pathlib import Path

from base_planner.config import PlannerConfig
from base_planner.coordinator import PlacementCoordinator
from base_planner.queries.summary import plan_summary
from base_planner.validators.plan import validate_plan

GRID = 24
LOW, HIGH = 2, 21  # wall corners
GATE_X = 10        # gate spans x = 10..13 on the south wall


def build() -> PlacementCoordinator:
    planner = PlacementCoordinator(config=PlannerConfig(grid_width=GRID, grid_height=GRID))

    # --- Palisade ---
    planner.start_line("Palisade", (LOW, LOW))
    for corner in [(HIGH, LOW), (HIGH, HIGH), (LOW, HIGH)]:
        planner.update_line(corner)
        planner.extend_line(corner)
    planner.update_line((LOW, LOW + 1))
    planner.complete_line()

    # --- Gate ---
    middle = [planner.entity_at(x, HIGH) for x in (GATE_X + 1, GATE_X + 2)]
    planner.remove_many(middle)
    planner.place("Palisade Gate", GATE_X, HIGH)

    # --- Cabin with a cellar ---
    cabin = planner.place("Log Cabin", 6, 6)
    planner.open_interior(cabin.interior_id)
    planner.place("Cellar Door", 1, 1)
    planner.place("Chest", 8, 1)
    planner.close_interior()

    # --- Path ---
    planner.paint((GATE_X + 1, HIGH - 1), (GATE_X + 2, 11), "Granite")
    return planner


if __name__ == "__main__":
    planner = build()
    for issue in validate_plan(planner):
        print(f"[{issue.severity}] {issue.message}")
    summary = plan_summary(planner)
    print(f"Entities: {summary['entities']}, surface cells: {summary['surface_cells']}")
    for interior in summary["interiors"]:
        print(f"Interior {interior['id']}: floors {interior['floors']}")

    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("walled_homestead.json")
    out.write_text(planner.to_json())
    print(f"Saved: {out}")
