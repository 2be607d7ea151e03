"""Planner exceptions.

Interactive rejections (a blocked placement, an undo past the start of
history) are reported as return values, not exceptions. Only malformed
input that cannot be acted on at all raises.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for planner errors."""


class LoadFormatError(PlannerError, ValueError):
    """A persisted plan document could not be understood.

    Raised before any in-memory state is touched.
    """
