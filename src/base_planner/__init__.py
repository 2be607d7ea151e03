"""Base planner: placement and state engine for grid-based base layouts."""

__version__ = "0.1.0"
