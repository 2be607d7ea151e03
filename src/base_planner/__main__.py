"""Base Planner CLI.

Usage:
    python -m base_planner <command> <plan.json> [options]

All plan modifications go through the 'apply' command with JSON actions.
Read-only commands (validate, stats, list) use simple CLI args.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from base_planner.cli.main import app
from base_planner.config import PlannerConfig
from base_planner.coordinator import PlacementCoordinator
from base_planner.errors import LoadFormatError
from base_planner.models.entities import Entity
from base_planner.queries.summary import describe_entity, describe_interior, plan_summary
from base_planner.validators.plan import validate_plan


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_plan(plan: str) -> PlacementCoordinator:
    """Load a plan file into a fresh coordinator."""
    path = Path(plan)
    if not path.exists():
        _output({"ok": False, "error": f"Plan not found: {path}"})
        raise typer.Exit(1)
    coordinator = PlacementCoordinator()
    try:
        coordinator.load_document(path.read_text())
    except LoadFormatError as e:
        _output({"ok": False, "error": str(e)})
        raise typer.Exit(1)
    return coordinator


def _save_plan(coordinator: PlacementCoordinator, plan: str) -> Path:
    """Write the plan back as JSON."""
    path = Path(plan)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(coordinator.to_json())
    return path


def _validate_json(coordinator: PlacementCoordinator) -> dict:
    """Run all validators and return structured results."""
    errors = validate_plan(coordinator)
    return {
        "errors": sum(1 for e in errors if e.severity == "error"),
        "warnings": sum(1 for e in errors if e.severity == "warning"),
        "details": [
            {
                "severity": e.severity,
                "element_type": e.element_type,
                "element_id": e.element_id,
                "message": e.message,
            }
            for e in errors
        ],
    }


def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------

@app.command()
def new(
    plan: str = typer.Argument(..., help="Plan file to create"),
    width: int = typer.Option(50, "--width", "-w", help="Grid width in cells"),
    height: int = typer.Option(50, "--height", "-h", help="Grid height in cells"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing plan"),
):
    """Create an empty plan."""
    if Path(plan).exists() and not force:
        _output({"ok": False, "error": f"Plan already exists: {plan} (use --force)"})
        raise typer.Exit(1)
    if width <= 0 or height <= 0:
        _output({"ok": False, "error": f"Grid size must be positive, got {width}x{height}"})
        raise typer.Exit(1)
    coordinator = PlacementCoordinator(config=PlannerConfig(grid_width=width, grid_height=height))
    path = _save_plan(coordinator, plan)
    _output({"ok": True, "plan": str(path), "grid": {"width": width, "height": height}})


@app.command()
def validate(plan: str = typer.Argument(..., help="Plan file")):
    """Run all validators on a plan."""
    coordinator = _load_plan(plan)
    _output({"ok": True, "validation": _validate_json(coordinator)})


@app.command()
def stats(plan: str = typer.Argument(..., help="Plan file")):
    """Plan overview: grid, entity and surface counts, interiors."""
    coordinator = _load_plan(plan)
    _output({"ok": True, **plan_summary(coordinator)})


@app.command("list")
def list_cmd(
    plan: str = typer.Argument(..., help="Plan file"),
    what: str = typer.Argument(..., help="What to list: entities, surfaces, interiors"),
    interior: Optional[str] = typer.Option(None, "--interior", "-i", help="List inside an interior"),
    floor: int = typer.Option(0, "--floor", "-f", help="Interior floor index"),
):
    """List plan elements."""
    coordinator = _load_plan(plan)
    if interior is not None:
        if not coordinator.open_interior(interior):
            _output({"ok": False, "error": f"Interior not found: {interior}"})
            raise typer.Exit(1)
        if not coordinator.set_floor(floor):
            _output({"ok": False, "error": f"Interior {interior} has no floor {floor}"})
            raise typer.Exit(1)

    result: dict = {"ok": True}
    if what == "entities":
        result["entities"] = [describe_entity(e) for e in coordinator.entities()]
    elif what == "surfaces":
        result["surfaces"] = [
            {"x": x, "y": y, "name": s.name, "category": s.category.value}
            for (x, y), s in sorted(coordinator.surface_cells())
        ]
    elif what == "interiors":
        result["interiors"] = [describe_interior(s) for s in coordinator.interiors()]
    else:
        _output({"ok": False, "error": f"Unknown list target: {what}. Use: entities, surfaces, interiors"})
        raise typer.Exit(1)

    _output(result)


# ---------------------------------------------------------------------------
# Apply command (modifications)
# ---------------------------------------------------------------------------

def _require_entity(coordinator: PlacementCoordinator, action: dict) -> Entity:
    """Find the entity an action targets, by "id" or by "at": [x, y]."""
    if "id" in action:
        entity = coordinator.find_entity(action["id"])
        if entity is None:
            raise ValueError(f"Entity '{action['id']}' not found")
        return entity
    x, y = action["at"]
    entity = coordinator.entity_at(x, y)
    if entity is None:
        raise ValueError(f"No entity at ({x}, {y})")
    return entity


def _dispatch_action(coordinator: PlacementCoordinator, action: dict) -> dict:
    """Dispatch a single action to the coordinator. Returns result dict."""
    cmd = action.get("action")

    try:
        if cmd == "place":
            entity = coordinator.place(
                action["kind"], action["x"], action["y"],
                rotation=action.get("rotation", 0),
            )
            if entity is None:
                return {"action": cmd, "error": (
                    f"Cannot place {action['kind']} at ({action['x']}, {action['y']})"
                )}
            return {"action": cmd, "id": entity.entity_id, "interior_id": entity.interior_id}

        elif cmd == "remove":
            entity = _require_entity(coordinator, action)
            if not coordinator.remove(entity):
                return {"action": cmd, "error": f"Cannot remove {entity.entity_id}"}
            return {"action": cmd, "id": entity.entity_id}

        elif cmd == "move":
            entity = _require_entity(coordinator, action)
            old_id = entity.entity_id
            if not coordinator.move(entity, action["x"], action["y"]):
                return {"action": cmd, "error": f"Cannot move {old_id} to ({action['x']}, {action['y']})"}
            return {"action": cmd, "old": old_id, "id": entity.entity_id}

        elif cmd == "rotate":
            entity = _require_entity(coordinator, action)
            if not coordinator.rotate(entity):
                return {"action": cmd, "error": f"Cannot rotate {entity.entity_id}"}
            return {"action": cmd, "id": entity.entity_id, "rotation": entity.rotation}

        elif cmd == "paint":
            count = coordinator.paint(
                tuple(action["start"]), tuple(action.get("end", action["start"])),
                action["surface"], mode=action.get("mode", "rectangle"),
            )
            return {"action": cmd, "cells": count}

        elif cmd == "erase":
            count = coordinator.erase(
                tuple(action["start"]), tuple(action.get("end", action["start"])),
                mode=action.get("mode", "rectangle"),
            )
            return {"action": cmd, "cells": count}

        elif cmd == "line":
            points = [tuple(p) for p in action["points"]]
            if not points:
                raise ValueError("A line needs at least one point")
            coordinator.start_line(action["kind"], points[0])
            for i, point in enumerate(points[1:], start=1):
                coordinator.update_line(point)
                if i < len(points) - 1 and not coordinator.extend_line(point):
                    coordinator.cancel_line()
                    return {"action": cmd, "error": (
                        f"Line cannot turn at {list(point)}: not on the current segment's axis"
                    )}
            result = coordinator.complete_line()
            if not result.ok:
                return {"action": cmd, "error": f"No cell of the {action['kind']} line could be placed"}
            return {
                "action": cmd,
                "placed": len(result.placed),
                "upgraded": len(result.upgraded),
                "removed": len(result.removed),
                "skipped": len(result.skipped),
                "failed": len(result.failed),
            }

        elif cmd == "resize":
            if not coordinator.resize_grid(action["width"], action["height"]):
                return {"action": cmd, "error": (
                    f"Cannot resize to {action['width']}x{action['height']}: entities outside"
                )}
            return {"action": cmd, "width": action["width"], "height": action["height"]}

        elif cmd == "clear-surfaces":
            coordinator.clear_surfaces()
            return {"action": cmd}

        elif cmd == "clear":
            coordinator.clear_all()
            return {"action": cmd}

        elif cmd == "undo":
            if not coordinator.undo():
                return {"action": cmd, "error": "Nothing to undo"}
            return {"action": cmd}

        elif cmd == "redo":
            if not coordinator.redo():
                return {"action": cmd, "error": "Nothing to redo"}
            return {"action": cmd}

        elif cmd == "open-interior":
            space_id = action.get("interior")
            if space_id is None:
                space_id = _require_entity(coordinator, action).interior_id
            if not space_id or not coordinator.open_interior(space_id):
                return {"action": cmd, "error": f"Interior not found: {space_id}"}
            return {"action": cmd, "interior": space_id}

        elif cmd == "close-interior":
            coordinator.close_interior()
            return {"action": cmd}

        elif cmd == "set-floor":
            if not coordinator.set_floor(action["floor"]):
                return {"action": cmd, "error": f"No floor {action['floor']} in the open interior"}
            return {"action": cmd, "floor": action["floor"]}

        else:
            return {"action": cmd, "error": f"Unknown action: {cmd}"}

    except (KeyError, TypeError, ValueError) as e:
        return {"action": cmd, "error": str(e)}


@app.command()
def apply(
    plan: str = typer.Argument(..., help="Plan file"),
    actions_json: Optional[str] = typer.Argument(None, help="JSON array of actions"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Read actions from JSON file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read actions from stdin"),
    no_validate: bool = typer.Option(False, "--no-validate", help="Skip validation after apply"),
):
    """Apply modifications to a plan via JSON actions."""
    # Parse actions from one of: positional arg, --file, --stdin
    if stdin:
        raw = sys.stdin.read()
    elif file:
        raw = Path(file).read_text()
    elif actions_json:
        raw = actions_json
    else:
        _output({"ok": False, "error": "Provide actions as argument, --file, or --stdin"})
        raise typer.Exit(1)

    try:
        actions = json.loads(raw)
    except json.JSONDecodeError as e:
        _output({"ok": False, "error": f"Invalid JSON: {e}"})
        raise typer.Exit(1)

    if not isinstance(actions, list):
        actions = [actions]  # allow single action without wrapping in array

    coordinator = _load_plan(plan)

    results = []
    for i, action in enumerate(actions):
        result = _dispatch_action(coordinator, action)
        results.append(result)
        if "error" in result:
            # Stop on first error, plan file untouched
            _output({
                "ok": False,
                "error": f"Action {i} ({action.get('action', '?')}) failed: {result['error']}",
                "applied": i,
                "results": results,
            })
            raise typer.Exit(1)

    _save_plan(coordinator, plan)

    output: dict = {
        "ok": True,
        "actions_applied": len(results),
        "results": results,
    }
    if not no_validate:
        output["validation"] = _validate_json(coordinator)

    _output(output)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
