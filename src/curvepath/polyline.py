"""Polyline: connects the control points with straight lines."""

from __future__ import annotations

from curvepath.curve import Curve
from curvepath.exceptions import InvalidCurveState
from curvepath.multipath import MultiPath


class Polyline(Curve):
    """Straight segments between consecutive control points, no flattening involved."""

    def append_to(self, output: MultiPath) -> None:
        self._check_sequencer_range()
        start_count = output.num_points

        points = self._read_all(output.dimension)
        if points.shape[0] == 0:
            raise InvalidCurveState("Polyline needs at least 1 control point")

        self._emit_start(output, points[0])
        for p in points[1:]:
            output.line_to(p)
        self._log_appended(output, start_count, 1)
