"""Lagrange interpolating curve generated in overlapping sections."""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from curvepath.common import DEFAULT_LAGRANGE_KNOTS
from curvepath.control_path import ControlPath
from curvepath.curve import ParametricCurve
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.flatten import flatten
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer

logger = logging.getLogger(__name__)

Section = Tuple[NDArray[np.float64], float, float]


def lagrange_basis(knots: NDArray[np.float64], t: float) -> NDArray[np.float64]:
    """
    Lagrange basis values ``L_i(t) = prod((t - k_j) / (k_i - k_j))`` for all i.

    Factors with ``k_i == k_j`` (including ``j == i``) are skipped, so repeated
    knots do not divide by zero.
    """
    diff = knots[:, None] - knots[None, :]
    numerators = np.broadcast_to(t - knots, diff.shape)
    factors = np.divide(numerators, diff, out=np.ones_like(diff), where=diff != 0.0)
    return factors.prod(axis=1)


class LagrangeCurve(ParametricCurve):
    """
    Curve passing through its control points at the knot values.

    Each section uses as many points as the knot vector has values and is drawn
    over ``[k[base_index], k[base_index + base_length]]``; the next section starts
    ``base_length`` points later. With one knot per control point, base_index 0
    and base_length ``n - 1`` give a single polynomial through all points.

    The points before ``base_index`` and after ``base_index + base_length`` of
    the outer sections are only reached with ``interpolate_first`` and
    ``interpolate_last``.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._knot_vector: Tuple[float, ...] = DEFAULT_LAGRANGE_KNOTS
        self._base_index = 1
        self._base_length = 1
        self._interpolate_first = False
        self._interpolate_last = False
        self._knots: Optional[NDArray[np.float64]] = None
        self._window: Optional[NDArray[np.float64]] = None

    @property
    def knot_vector(self) -> Tuple[float, ...]:
        return self._knot_vector

    @knot_vector.setter
    def knot_vector(self, values: Sequence[float]) -> None:
        if values is None or len(values) == 0:
            raise InvalidArgument("Knot vector cannot be None or empty.")
        self._knot_vector = tuple(float(v) for v in values)

    @property
    def base_index(self) -> int:
        return self._base_index

    @base_index.setter
    def base_index(self, value: int) -> None:
        if value < 0:
            raise InvalidArgument(f"base_index must be >= 0, got {value}")
        self._base_index = int(value)

    @property
    def base_length(self) -> int:
        return self._base_length

    @base_length.setter
    def base_length(self, value: int) -> None:
        if value <= 0:
            raise InvalidArgument(f"base_length must be > 0, got {value}")
        self._base_length = int(value)

    @property
    def interpolate_first(self) -> bool:
        return self._interpolate_first

    @interpolate_first.setter
    def interpolate_first(self, value: bool) -> None:
        self._interpolate_first = bool(value)

    @property
    def interpolate_last(self) -> bool:
        return self._interpolate_last

    @interpolate_last.setter
    def interpolate_last(self, value: bool) -> None:
        self._interpolate_last = bool(value)

    # ------------------------------------------------------------------ sections

    def _check(self) -> None:
        self._check_sequencer_range()
        size = len(self._knot_vector)
        if self._base_index + self._base_length >= size:
            raise InvalidCurveState(
                f"LagrangeCurve: base_index + base_length must be < {size}, "
                f"got {self._base_index} + {self._base_length}"
            )
        num_points = self._sequencer.total_length()
        if num_points < size:
            raise InvalidCurveState(f"LagrangeCurve needs at least {size} points, got {num_points}")

    def _iter_sections(self, dimension: int) -> Iterator[Section]:
        knots = self._knot_vector
        size = len(knots)
        first = self._base_index
        last = self._base_index + self._base_length
        seq = self._sequencer

        if self._interpolate_first:
            if first == 0:
                logger.warning("LagrangeCurve: interpolate_first has no effect with base_index 0")
            else:
                seq.reset()
                yield self._read_window(size, dimension), knots[0], knots[first]

        seq.reset()
        last_state = seq.save()
        while True:
            section_state = seq.save()
            next_state = section_state
            indices = []
            while len(indices) < size and seq.has_next():
                if len(indices) == self._base_length:
                    next_state = seq.save()
                indices.append(seq.next())
            if len(indices) < size:
                break
            seq.restore(next_state)
            last_state = section_state
            yield self._control_path.locations(indices, dimension), knots[first], knots[last]

        if self._interpolate_last:
            if last >= size - 1:
                logger.warning("LagrangeCurve: interpolate_last has no effect, the sections reach the last knot")
            else:
                seq.restore(last_state)
                yield self._read_window(size, dimension), knots[last], knots[-1]

    def _prepare(self, dimension: int, section: int) -> None:
        self._check()
        self._knots = np.array(self._knot_vector, dtype=np.float64)
        for index, (window, _, _) in enumerate(self._iter_sections(dimension)):
            if index == section:
                self._window = window
                return
        raise InvalidArgument(f"section {section} out of range")

    def eval(self, p: NDArray[np.float64]) -> None:
        dim = p.shape[0] - 1
        weights = lagrange_basis(self._knots, p[-1])
        p[:dim] = weights @ self._window[:, :dim]

    def append_to(self, output: MultiPath) -> None:
        self._check()
        dim = output.dimension
        start_count = output.num_points
        self._knots = np.array(self._knot_vector, dtype=np.float64)

        sections = 0
        for window, t1, t2 in self._iter_sections(dim):
            self._window = window
            if t2 < t1:
                t1, t2 = t2, t1
            if sections == 0:
                start = np.zeros(dim + 1, dtype=np.float64)
                start[dim] = t1
                self.eval(start)
                self._emit_start(output, start)
            flatten(self, t1, t2, output)
            sections += 1
        self._log_appended(output, start_count, sections)

    def reset_memory(self) -> None:
        self._knots = None
        self._window = None
