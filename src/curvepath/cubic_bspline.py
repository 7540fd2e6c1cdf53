"""Uniform cubic B-spline evaluated window by window."""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np
from numpy.typing import NDArray

from curvepath.common import CubicSection
from curvepath.control_path import ControlPath
from curvepath.curve import SlidingWindowCurve
from curvepath.sequencer import IndexSequencer

# Rows are the four blending functions b0..b3, columns the coefficients of 1, s, s**2, s**3.
_FIRST = np.array(
    [
        [1.0, -3.0, 3.0, -1.0],
        [0.0, 3.0, -4.5, 1.75],
        [0.0, 0.0, 1.5, -11.0 / 12.0],
        [0.0, 0.0, 0.0, 1.0 / 6.0],
    ],
    dtype=np.float64,
)
_SECOND = np.array(
    [
        [0.25, -0.75, 0.75, -0.25],
        [7.0 / 12.0, 0.25, -1.25, 7.0 / 12.0],
        [1.0 / 6.0, 0.5, 0.5, -0.5],
        [0.0, 0.0, 0.0, 1.0 / 6.0],
    ],
    dtype=np.float64,
)
_MIDDLE = np.array(
    [
        [1.0 / 6.0, -0.5, 0.5, -1.0 / 6.0],
        [2.0 / 3.0, 0.0, -1.0, 0.5],
        [1.0 / 6.0, 0.5, 0.5, -0.5],
        [0.0, 0.0, 0.0, 1.0 / 6.0],
    ],
    dtype=np.float64,
)

# section -> (parameter reversed, blending matrix); the trailing sections mirror the leading ones
SECTION_TABLE: Dict[CubicSection, Tuple[bool, NDArray[np.float64]]] = {
    CubicSection.FIRST: (False, _FIRST),
    CubicSection.SECOND: (False, _SECOND),
    CubicSection.MIDDLE: (False, _MIDDLE),
    CubicSection.SECOND_LAST: (True, _SECOND[::-1].copy()),
    CubicSection.LAST: (True, _FIRST[::-1].copy()),
}


def section_for_window(window: int, num_windows: int, interpolate_endpoints: bool) -> CubicSection:
    """
    Section used for a window of a CubicBSpline.

    Without endpoint interpolation every window is a MIDDLE section. With it,
    the first two and the last two windows use the clamped sections, which
    needs at least 4 windows (7 points).
    """
    if not interpolate_endpoints:
        return CubicSection.MIDDLE
    if window == 0:
        return CubicSection.FIRST
    if window == 1:
        return CubicSection.SECOND
    if window == num_windows - 1:
        return CubicSection.LAST
    if window == num_windows - 2:
        return CubicSection.SECOND_LAST
    return CubicSection.MIDDLE


def blending_weights(section: CubicSection, t: float) -> NDArray[np.float64]:
    """The four blending weights of a section at t."""
    reversed_param, matrix = SECTION_TABLE[section]
    s = 1.0 - t if reversed_param else t
    return matrix @ np.array([1.0, s, s * s, s * s * s])


class CubicBSpline(SlidingWindowCurve):
    """
    Uniform cubic B-spline.

    Each window of 4 control points defines one piece. The curve passes near
    the points, but not through them. With ``interpolate_endpoints`` the first
    and last pieces use clamped blending functions, so the curve starts at the
    first and ends at the last control point; this requires at least 7 points.

    A closed curve is obtained by repeating the first three indices at the end,
    e.g. pairs ``(0, n - 1), (0, 2)``, with ``interpolate_endpoints`` off.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._interpolate_endpoints = False
        self._section = CubicSection.MIDDLE

    @property
    def interpolate_endpoints(self) -> bool:
        return self._interpolate_endpoints

    @interpolate_endpoints.setter
    def interpolate_endpoints(self, value: bool) -> None:
        self._interpolate_endpoints = bool(value)

    @property
    def section(self) -> CubicSection:
        """Section of the window loaded last."""
        return self._section

    def min_points(self) -> int:
        return 7 if self._interpolate_endpoints else 4

    def _enter_window(self, window_index: int, num_windows: int) -> None:
        self._section = section_for_window(window_index, num_windows, self._interpolate_endpoints)

    def eval(self, p: NDArray[np.float64]) -> None:
        dim = p.shape[0] - 1
        weights = blending_weights(self._section, p[-1])
        p[:dim] = weights @ self._window[:, :dim]
