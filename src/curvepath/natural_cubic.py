"""Natural cubic spline through all control points, open or closed."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from curvepath.control_path import ControlPath
from curvepath.curve import ParametricCurve
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.flatten import flatten
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer


def _open_slopes(pts: NDArray[np.float64]) -> NDArray[np.float64]:
    """First derivatives at the points of an open natural spline (Thomas algorithm)."""
    n = pts.shape[0] - 1
    a = np.empty(n + 1, dtype=np.float64)
    b = np.empty_like(pts)
    c = np.empty_like(pts)

    a[0] = 0.5
    for i in range(1, n):
        a[i] = 1.0 / (4.0 - a[i - 1])
    a[n] = 1.0 / (2.0 - a[n - 1])

    b[0] = a[0] * 3.0 * (pts[1] - pts[0])
    for i in range(1, n):
        b[i] = a[i] * (3.0 * (pts[i + 1] - pts[i - 1]) - b[i - 1])
    b[n] = a[n] * (3.0 * (pts[n] - pts[n - 1]) - b[n - 1])

    c[n] = b[n]
    for i in range(n - 1, -1, -1):
        c[i] = b[i] - a[i] * c[i + 1]
    return c


def _closed_slopes(pts: NDArray[np.float64]) -> NDArray[np.float64]:
    """First derivatives at the points of a closed natural spline.

    The cyclic tridiagonal system is solved with the Thomas algorithm plus a
    correction column ``d`` coupling every unknown to the last one.
    """
    n = pts.shape[0] - 1
    a = np.zeros(n + 1, dtype=np.float64)
    d = np.zeros(n + 1, dtype=np.float64)
    b = np.zeros_like(pts)
    c = np.zeros_like(pts)

    e = 0.25
    a[1] = d[1] = e
    b[0] = e * 3.0 * (pts[1] - pts[n])
    h = 4.0
    f = 3.0 * (pts[0] - pts[n - 1])
    g = 1.0
    for i in range(1, n):
        e = 1.0 / (4.0 - a[i])
        a[i + 1] = e
        d[i + 1] = -e * d[i]
        b[i] = e * (3.0 * (pts[i + 1] - pts[i - 1]) - b[i - 1])
        h -= g * d[i]
        f = f - g * b[i - 1]
        g = -a[i] * g
    h -= (g + 1.0) * (a[n] + d[n])
    b[n] = f - (g + 1.0) * b[n - 1]

    c[n] = b[n] / h
    c[n - 1] = b[n - 1] - (a[n] + d[n]) * c[n]
    for i in range(n - 2, -1, -1):
        c[i] = b[i] - a[i + 1] * c[i + 1] - d[i + 1] * c[n]
    return c


def natural_cubic_coefficients(pts: NDArray[np.float64], closed: bool) -> NDArray[np.float64]:
    """
    Polynomial coefficients of the spline segments.

    Args:
        pts: Control points, shape (count, dim) with count >= 2.
        closed: If True an extra segment joins the last point to the first.

    Returns:
        NDArray[np.float64] of shape (segments, 4, dim); segment i is
        ``w + x*t + y*t**2 + z*t**3`` for t in [0, 1], with
        ``segments = count`` when closed and ``count - 1`` otherwise.
    """
    if closed:
        c = _closed_slopes(pts)
        nxt = np.roll(pts, -1, axis=0)
        c_nxt = np.roll(c, -1, axis=0)
        start, end, c0, c1 = pts, nxt, c, c_nxt
    else:
        c = _open_slopes(pts)
        start, end, c0, c1 = pts[:-1], pts[1:], c[:-1], c[1:]

    w = start
    x = c0
    y = 3.0 * (end - start) - 2.0 * c0 - c1
    z = 2.0 * (start - end) + c0 + c1
    return np.stack((w, x, y, z), axis=1)


class NaturalCubicSpline(ParametricCurve):
    """
    Piecewise cubic curve passing through every control point with continuous
    first and second derivatives.

    Open curves have zero curvature at both ends. Closed curves add a segment
    from the last point back to the first and are smooth across the join.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._closed = False
        self._coefficients: Optional[NDArray[np.float64]] = None
        self._segment = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @closed.setter
    def closed(self, value: bool) -> None:
        self._closed = bool(value)

    def num_segments(self) -> int:
        """Number of segments the current control points produce."""
        count = self._sequencer.total_length()
        return count if self._closed else count - 1

    def _load(self, dimension: int) -> None:
        self._check_sequencer_range()
        count = self._sequencer.total_length()
        if count < 2:
            raise InvalidCurveState(f"NaturalCubicSpline needs at least 2 points, got {count}")
        pts = self._read_all(dimension)
        self._coefficients = natural_cubic_coefficients(pts, self._closed)

    def _prepare(self, dimension: int, section: int) -> None:
        self._load(dimension)
        if section < 0 or section >= self._coefficients.shape[0]:
            raise InvalidArgument(f"section must be in [0, {self._coefficients.shape[0]}), got {section}")
        self._segment = section

    def eval(self, p: NDArray[np.float64]) -> None:
        t = p[-1]
        dim = p.shape[0] - 1
        w, x, y, z = self._coefficients[self._segment, :, :dim]
        p[:dim] = ((z * t + y) * t + x) * t + w

    def append_to(self, output: MultiPath) -> None:
        dim = output.dimension
        start_count = output.num_points
        self._load(dim)

        self._segment = 0
        start = np.zeros(dim + 1, dtype=np.float64)
        self.eval(start)
        self._emit_start(output, start)

        num_segments = self._coefficients.shape[0]
        for segment in range(num_segments):
            self._segment = segment
            flatten(self, 0.0, 1.0, output)
        self._log_appended(output, start_count, num_segments)

    def reset_memory(self) -> None:
        self._coefficients = None
