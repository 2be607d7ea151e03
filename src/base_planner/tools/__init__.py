"""Interactive tools: line building and measurement."""

from base_planner.tools.line_builder import LineBuilder, LineState, OrientationProbe
from base_planner.tools.measurement import MeasurementTool

__all__ = ["LineBuilder", "LineState", "MeasurementTool", "OrientationProbe"]
