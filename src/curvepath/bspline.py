"""Non-rational and rational B-splines of arbitrary degree."""

from __future__ import annotations

import itertools
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from curvepath.common import DEFAULT_BSPLINE_KNOTS, DEFAULT_DEGREE, DEFAULT_NURBS_WEIGHTS, KnotVectorType
from curvepath.control_path import ControlPath
from curvepath.curve import ParametricCurve
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.flatten import flatten
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer

logger = logging.getLogger(__name__)


def basis_value(knots: Sequence[float], order: int, t: float, i: int) -> float:
    """
    B-spline basis function ``N(t, i)`` of the given order (degree + 1).

    Evaluated without recursion. The Cox-de Boor recursion is unrolled into the
    sum over all paths from level ``order`` down to level 1: a path either keeps
    the index (factor ``(t - u[i]) / (u[i+m-1] - u[i])``) or steps right (factor
    ``(u[i+m] - t) / (u[i+m] - u[i+1])``). Only paths that end in the first
    non-empty knot span containing t contribute, so a t lying exactly on a knot
    is counted in one span only.

    Args:
        knots: Knot vector, needs at least ``i + order + 1`` entries.
        order: Degree + 1, at least 1.
        t: Curve parameter.
        i: Index of the basis function.

    Returns:
        float: the basis value, 0.0 outside the support
    """
    u = knots
    for j in range(order):
        t1 = u[i + j]
        t2 = u[i + j + 1]
        if t1 <= t <= t2 and t1 != t2:
            break
    else:
        return 0.0

    total = 0.0
    # level position k stands for recursion level m = order - k
    for right_steps in itertools.combinations(range(order - 1), j):
        e = 1.0
        idx = i
        right = set(right_steps)
        for k in range(order - 1):
            m = order - k
            if k in right:
                e *= (u[idx + m] - t) / (u[idx + m] - u[idx + 1])
                idx += 1
            else:
                e *= (t - u[idx]) / (u[idx + m - 1] - u[idx])
        total += e
    return total


def uniform_clamped_knots(num_points: int, order: int) -> NDArray[np.float64]:
    """Knots ``[0]*order, 1/(f+1), ..., f/(f+1), [1]*order`` with ``f = num_points - order``."""
    f = num_points - order
    grad = 1.0 / (f + 1)
    inner = np.arange(1, f + 1, dtype=np.float64) * grad
    return np.concatenate((np.zeros(order), inner, np.ones(order)))


def uniform_unclamped_knots(num_points: int, order: int) -> NDArray[np.float64]:
    """``num_points + order`` evenly spaced knots from 0 to 1."""
    return np.linspace(0.0, 1.0, num_points + order)


###############################################################################
# BSpline
###############################################################################


class BSpline(ParametricCurve):
    """
    General non-rational B-spline of configurable degree.

    Knot vector types:
        UNIFORM_CLAMPED: first and last ``degree + 1`` knots repeated, default interval [0, 1].
            With 4 points and degree 3 the curve equals a cubic Bezier curve.
        UNIFORM_UNCLAMPED: evenly spaced knots in [0, 1]; the default interval
            leaves out ``degree`` knot spans on each side.
        NON_UNIFORM: the knot vector set by the caller, which must hold exactly
            ``points + degree + 1`` non-decreasing values.

    With ``use_default_interval`` disabled, or in NON_UNIFORM mode, the curve is
    drawn over ``interval``.

    Evaluation costs about ``2**degree`` products per basis function.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._t_min = 0.0
        self._t_max = 1.0
        self._order = DEFAULT_DEGREE + 1
        self._knot_vector_type = KnotVectorType.UNIFORM_CLAMPED
        self._knot_vector: Tuple[float, ...] = DEFAULT_BSPLINE_KNOTS
        self._use_default_interval = True
        # scratch
        self._points: Optional[NDArray[np.float64]] = None
        self._knots: Optional[NDArray[np.float64]] = None
        self._active_interval: Tuple[float, float] = (0.0, 1.0)

    @ParametricCurve.sample_limit.setter
    def sample_limit(self, value: int) -> None:
        self._sample_limit = self._check_sample_limit(value)

    @property
    def degree(self) -> int:
        return self._order - 1

    @degree.setter
    def degree(self, value: int) -> None:
        if value <= 0:
            raise InvalidArgument(f"degree must be > 0, got {value}")
        self._order = int(value) + 1

    @property
    def order(self) -> int:
        return self._order

    @property
    def knot_vector_type(self) -> KnotVectorType:
        return self._knot_vector_type

    @knot_vector_type.setter
    def knot_vector_type(self, value: KnotVectorType) -> None:
        if not isinstance(value, KnotVectorType):
            raise InvalidArgument(f"unknown knot vector type {value!r}")
        self._knot_vector_type = value

    @property
    def knot_vector(self) -> Tuple[float, ...]:
        """Knot vector used in NON_UNIFORM mode."""
        return self._knot_vector

    @knot_vector.setter
    def knot_vector(self, values: Sequence[float]) -> None:
        if values is None or len(values) == 0:
            raise InvalidArgument("Knot vector cannot be None or empty.")
        self._knot_vector = tuple(float(v) for v in values)

    @property
    def use_default_interval(self) -> bool:
        return self._use_default_interval

    @use_default_interval.setter
    def use_default_interval(self, value: bool) -> None:
        self._use_default_interval = bool(value)

    @property
    def interval(self) -> Tuple[float, float]:
        return self._t_min, self._t_max

    def set_interval(self, t_min: float, t_max: float) -> None:
        if t_min > t_max:
            raise InvalidArgument(f"t_min <= t_max required, got [{t_min}, {t_max}]")
        self._t_min = float(t_min)
        self._t_max = float(t_max)

    @property
    def active_interval(self) -> Tuple[float, float]:
        """Interval used by the last append (or ``evaluate``)."""
        return self._active_interval

    # ------------------------------------------------------------------ evaluation

    def _build_knots(self, num_points: int) -> NDArray[np.float64]:
        order = self._order
        size = num_points + order
        t1, t2 = self._t_min, self._t_max

        if self._knot_vector_type == KnotVectorType.NON_UNIFORM:
            knots = np.array(self._knot_vector, dtype=np.float64)
            if knots.shape[0] != size:
                raise InvalidCurveState(
                    f"{type(self).__name__}: knot vector needs {size} values for "
                    f"{num_points} points and degree {self.degree}, got {knots.shape[0]}"
                )
            if np.any(np.diff(knots) < 0):
                raise InvalidCurveState(f"{type(self).__name__}: knot vector must be non-decreasing")
        elif self._knot_vector_type == KnotVectorType.UNIFORM_UNCLAMPED:
            knots = uniform_unclamped_knots(num_points, order)
            if self._use_default_interval:
                grad = 1.0 / (size - 1)
                t1 = (order - 1) * grad
                t2 = 1.0 - (order - 1) * grad
        else:
            knots = uniform_clamped_knots(num_points, order)
            if self._use_default_interval:
                t1, t2 = 0.0, 1.0

        self._active_interval = (t1, t2)
        return knots

    def _prepare(self, dimension: int, section: int) -> None:
        self._check_sequencer_range()
        num_points = self._sequencer.total_length()
        if num_points < self._order:
            raise InvalidCurveState(
                f"{type(self).__name__} of degree {self.degree} needs at least {self._order} points, got {num_points}"
            )
        self._knots = self._build_knots(num_points)
        self._points = self._read_all(dimension)

    def basis_values(self, t: float) -> NDArray[np.float64]:
        """All basis values ``N(t, i)`` for the loaded knot vector."""
        knots = self._knots
        order = self._order
        n = self._points.shape[0]
        values = np.zeros(n, dtype=np.float64)
        for i in range(n):
            if knots[i] <= t <= knots[i + order]:
                values[i] = basis_value(knots, order, t, i)
        return values

    def eval(self, p: NDArray[np.float64]) -> None:
        dim = p.shape[0] - 1
        weights = self.basis_values(p[-1])
        p[:dim] = weights @ self._points[:, :dim]

    def append_to(self, output: MultiPath) -> None:
        dim = output.dimension
        start_count = output.num_points
        self._prepare(dim, 0)
        t1, t2 = self._active_interval

        start = np.zeros(dim + 1, dtype=np.float64)
        start[dim] = t1
        self.eval(start)
        self._emit_start(output, start)
        flatten(self, t1, t2, output)
        logger.debug("%s flattened over [%g, %g]", type(self).__name__, t1, t2)
        self._log_appended(output, start_count, 1)

    def reset_memory(self) -> None:
        self._points = None
        self._knots = None


###############################################################################
# NURBSpline
###############################################################################


class NURBSpline(BSpline):
    """
    Non-uniform rational B-spline: a BSpline with one weight per control point.

    A point with weight 0 has no influence. If all weights that act at some t
    are 0, the denominator is replaced by 1 and the curve collapses towards the
    origin there. With ``use_weight_vector`` disabled all weights are 1.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._weight_vector: Tuple[float, ...] = DEFAULT_NURBS_WEIGHTS
        self._use_weight_vector = True
        self._weights: Optional[NDArray[np.float64]] = None
        self._zero_denominator_warned = False

    @property
    def weight_vector(self) -> Tuple[float, ...]:
        return self._weight_vector

    @weight_vector.setter
    def weight_vector(self, values: Sequence[float]) -> None:
        if values is None or len(values) == 0:
            raise InvalidArgument("Weight vector cannot be None or empty.")
        self._weight_vector = tuple(float(v) for v in values)

    @property
    def use_weight_vector(self) -> bool:
        return self._use_weight_vector

    @use_weight_vector.setter
    def use_weight_vector(self, value: bool) -> None:
        self._use_weight_vector = bool(value)

    def _prepare(self, dimension: int, section: int) -> None:
        self._check_sequencer_range()
        num_points = self._sequencer.total_length()
        if self._use_weight_vector:
            weights = np.array(self._weight_vector, dtype=np.float64)
            if weights.shape[0] != num_points:
                raise InvalidCurveState(
                    f"NURBSpline: weight vector needs {num_points} values, got {weights.shape[0]}"
                )
            if np.any(weights < 0):
                raise InvalidCurveState("NURBSpline: weights must be >= 0")
        else:
            weights = np.ones(num_points, dtype=np.float64)
        super()._prepare(dimension, section)
        self._weights = weights
        self._zero_denominator_warned = False

    def eval(self, p: NDArray[np.float64]) -> None:
        dim = p.shape[0] - 1
        nw = self.basis_values(p[-1]) * self._weights
        denominator = float(nw.sum())
        if denominator == 0.0:
            if not self._zero_denominator_warned:
                logger.warning("NURBSpline: all active weights are 0 at t=%g, using denominator 1", p[-1])
                self._zero_denominator_warned = True
            denominator = 1.0
        p[:dim] = (nw @ self._points[:, :dim]) / denominator

    def reset_memory(self) -> None:
        super().reset_memory()
        self._weights = None
