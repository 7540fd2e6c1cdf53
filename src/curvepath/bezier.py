"""Bezier curve of arbitrary degree over the selected control points."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from curvepath.combinatorics import ncr
from curvepath.common import BEZIER_FINITE_POINT_LIMIT
from curvepath.control_path import ControlPath
from curvepath.curve import ParametricCurve
from curvepath.exceptions import InvalidArgument
from curvepath.flatten import flatten
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer

logger = logging.getLogger(__name__)


def _incremental_powers(x: float, count: int) -> NDArray[np.float64]:
    """``[1, x, x**2, ...]`` with count entries, built by repeated multiplication."""
    powers = np.empty(count, dtype=np.float64)
    powers[0] = 1.0
    if count > 1:
        powers[1:] = x
        np.cumprod(powers, out=powers)
    return powers


def binomial_row(n: int) -> NDArray[np.float64]:
    """Binomial coefficients ``C(n - 1, i)`` for a curve with n points.

    Entries that overflow the float64 range are returned as 0.0.
    """
    row = np.array([ncr(n - 1, i) for i in range(n)], dtype=np.float64)
    row[~np.isfinite(row)] = 0.0
    return row


def bernstein_weights(t: float, n: int, binomials: Optional[NDArray[np.float64]] = None) -> NDArray[np.float64]:
    """
    Bernstein weights of a Bezier curve with n control points at parameter t.

    Args:
        t: Curve parameter, usually in [0, 1].
        n: Number of control points (degree + 1).
        binomials: Optional precomputed result of ``binomial_row(n)``.

    Returns:
        NDArray[np.float64] of shape (n,); sums to 1 unless binomials overflowed.
    """
    if n <= 0:
        raise InvalidArgument(f"n must be > 0, got {n}")
    if binomials is None:
        binomials = binomial_row(n)
    t_powers = _incremental_powers(t, n)
    one_minus_t_powers = _incremental_powers(1.0 - t, n)[::-1]
    return binomials * t_powers * one_minus_t_powers


class BezierCurve(ParametricCurve):
    """
    Bezier curve using all points of the sequencer as control points.

    The curve passes through the first and the last point. Each point influences
    the whole curve, so large point counts get expensive; past
    ``BEZIER_FINITE_POINT_LIMIT`` points the binomial coefficients overflow and
    the affected terms are left out (a warning is logged).
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._t_min = 0.0
        self._t_max = 1.0
        self._points: Optional[NDArray[np.float64]] = None
        self._binomials: Optional[NDArray[np.float64]] = None

    @ParametricCurve.sample_limit.setter
    def sample_limit(self, value: int) -> None:
        self._sample_limit = self._check_sample_limit(value)

    @property
    def interval(self) -> Tuple[float, float]:
        return self._t_min, self._t_max

    def set_interval(self, t_min: float, t_max: float) -> None:
        """Set the parameter range the curve is drawn over (default [0, 1])."""
        if t_min > t_max:
            raise InvalidArgument(f"t_min <= t_max required, got [{t_min}, {t_max}]")
        self._t_min = float(t_min)
        self._t_max = float(t_max)

    @property
    def t_min(self) -> float:
        return self._t_min

    @property
    def t_max(self) -> float:
        return self._t_max

    def _prepare(self, dimension: int, section: int) -> None:
        self._check_sequencer_range()
        self._points = self._read_all(dimension)
        n = self._points.shape[0]
        self._binomials = binomial_row(n)
        if n > BEZIER_FINITE_POINT_LIMIT:
            dropped = int(np.count_nonzero(self._binomials == 0.0))
            logger.warning(
                "BezierCurve with %d points: %d binomial coefficients overflow and are ignored",
                n,
                dropped,
            )

    def eval(self, p: NDArray[np.float64]) -> None:
        n = self._points.shape[0]
        weights = bernstein_weights(p[-1], n, self._binomials)
        dim = p.shape[0] - 1
        p[:dim] = weights @ self._points[:, :dim]

    def append_to(self, output: MultiPath) -> None:
        dim = output.dimension
        start_count = output.num_points
        self._prepare(dim, 0)

        start = np.zeros(dim + 1, dtype=np.float64)
        start[dim] = self._t_min
        self.eval(start)
        self._emit_start(output, start)
        flatten(self, self._t_min, self._t_max, output)
        self._log_appended(output, start_count, 1)

    def reset_memory(self) -> None:
        self._points = None
        self._binomials = None
