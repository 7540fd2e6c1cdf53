"""Cardinal and Catmull-Rom splines."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from curvepath.common import DEFAULT_ALPHA
from curvepath.control_path import ControlPath
from curvepath.curve import SlidingWindowCurve
from curvepath.sequencer import IndexSequencer


class CardinalSpline(SlidingWindowCurve):
    """
    Cardinal spline through the control points.

    The curve starts at the second and ends at the second last control point;
    the outer points only shape the tangents. ``alpha`` scales the tangents,
    0.5 gives the Catmull-Rom spline.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._alpha = DEFAULT_ALPHA

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._alpha = float(value)

    def eval(self, p: NDArray[np.float64]) -> None:
        t = p[-1]
        t2 = t * t
        t3 = t2 * t
        a = 2 * t3 - 3 * t2 + 1
        b = -2 * t3 + 3 * t2
        c = self._alpha * (t3 - 2 * t2 + t)
        d = self._alpha * (t3 - t2)

        dim = p.shape[0] - 1
        p0, p1, p2, p3 = self._window[:, :dim]
        p[:dim] = a * p1 + b * p2 + c * (p2 - p0) + d * (p3 - p1)


class CatmullRomSpline(SlidingWindowCurve):
    """Cardinal spline with alpha fixed at 0.5, evaluated in its reduced polynomial form."""

    def eval(self, p: NDArray[np.float64]) -> None:
        t = p[-1]
        t2 = t * t
        t3 = t2 * t

        dim = p.shape[0] - 1
        p0, p1, p2, p3 = self._window[:, :dim]
        # the 0.5 comes from the reduction, it is not alpha
        p[:dim] = (
            0.5
            * (
                (p3 - p0 + 3 * (p1 - p2)) * t3
                + (2 * (p0 + 2 * p2) - 5 * p1 - p3) * t2
                + (p2 - p0) * t
            )
            + p1
        )
