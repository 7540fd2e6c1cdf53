"""Abstract curve contract shared by all curve variants."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterator, Optional

import numpy as np
from numpy.typing import NDArray

from curvepath.common import DEFAULT_SAMPLE_LIMIT
from curvepath.control_path import ControlPath
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.flatten import flatten
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer

logger = logging.getLogger(__name__)


###############################################################################
# Curve
###############################################################################


class Curve(ABC):
    """A curve defined over the points of a ControlPath.

    The IndexSequencer decides which points the curve uses and in which order.
    Points are read live from the control path on every ``append_to``, so moving
    a point changes every curve that references it.

    Scratch arrays needed during evaluation belong to the curve instance. Two
    curves can be appended from two threads at the same time; a single curve
    must not be.
    """

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        self.control_path = control_path
        self.sequencer = sequencer
        self._connect = False

    @property
    def control_path(self) -> ControlPath:
        return self._control_path

    @control_path.setter
    def control_path(self, control_path: ControlPath) -> None:
        if control_path is None:
            raise InvalidArgument("ControlPath cannot be None.")
        self._control_path = control_path

    @property
    def sequencer(self) -> IndexSequencer:
        """Selects the control points of this curve and their order."""
        return self._sequencer

    @sequencer.setter
    def sequencer(self, sequencer: IndexSequencer) -> None:
        if sequencer is None:
            raise InvalidArgument("IndexSequencer cannot be None.")
        self._sequencer = sequencer

    @property
    def connect(self) -> bool:
        """If True the first appended point is a LINE_TO, otherwise a MOVE_TO."""
        return self._connect

    @connect.setter
    def connect(self, value: bool) -> None:
        self._connect = bool(value)

    @abstractmethod
    def append_to(self, output: MultiPath) -> None:
        """Append the points of this curve to output.

        Raises:
            InvalidCurveState: If the control points, the sequencer and the
                curve parameters do not fit together.
        """

    def reset_memory(self) -> None:
        """Release scratch arrays. They are allocated again when needed."""

    # ------------------------------------------------------------------ helpers

    def _check_sequencer_range(self) -> None:
        num_points = self._control_path.num_points
        if not self._sequencer.is_in_range(0, num_points):
            raise InvalidCurveState(
                f"{type(self).__name__}: sequencer '{self._sequencer.control_string}' "
                f"out of range for {num_points} control points"
            )

    def _emit_start(self, output: MultiPath, p: NDArray[np.float64]) -> None:
        if self._connect:
            output.line_to(p)
        else:
            output.move_to(p)

    def _read_window(self, size: int, dimension: int) -> Optional[NDArray[np.float64]]:
        """Consume up to size indices and return their locations, or None if fewer remain."""
        indices = []
        while len(indices) < size and self._sequencer.has_next():
            indices.append(self._sequencer.next())
        if len(indices) < size:
            return None
        return self._control_path.locations(indices, dimension)

    def _read_all(self, dimension: int) -> NDArray[np.float64]:
        self._sequencer.reset()
        return self._control_path.locations(list(self._sequencer), dimension)

    def _log_appended(self, output: MultiPath, start_count: int, sections: int) -> None:
        logger.debug(
            "%s appended %d points in %d section(s)",
            type(self).__name__,
            output.num_points - start_count,
            sections,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sequencer='{self._sequencer.control_string}', connect={self._connect})"


###############################################################################
# ParametricCurve
###############################################################################


class ParametricCurve(Curve):
    """A curve that can be evaluated at a parameter t and flattened adaptively."""

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._sample_limit = DEFAULT_SAMPLE_LIMIT

    @abstractmethod
    def eval(self, p: NDArray[np.float64]) -> None:
        """Evaluate the curve in place.

        ``p[-1]`` holds the parameter t on entry; the coordinates are written to
        ``p[:-1]``. Only valid while the curve is being appended or after
        ``_prepare`` loaded the control points.
        """

    @property
    def sample_limit(self) -> int:
        """Number of extra samples the flattening takes before accepting a segment."""
        return self._sample_limit

    @abstractmethod
    def _prepare(self, dimension: int, section: int) -> None:
        """Load the control points of the given section so that ``eval`` works."""

    def evaluate(self, t: float, dimension: int = 2, section: int = 0) -> NDArray[np.float64]:
        """Return the point of the curve at t.

        Args:
            t: Curve parameter.
            dimension: Number of coordinates to compute.
            section: Window or segment index for curves built from sections.

        Returns:
            NDArray[np.float64] of shape (dimension,)
        """
        if dimension <= 0:
            raise InvalidArgument(f"dimension must be > 0, got {dimension}")
        self._prepare(dimension, section)
        p = np.zeros(dimension + 1, dtype=np.float64)
        p[-1] = t
        self.eval(p)
        return p[:dimension].copy()

    @staticmethod
    def _check_sample_limit(value: int) -> int:
        if value < 0:
            raise InvalidArgument(f"sample_limit must be >= 0, got {value}")
        return int(value)


###############################################################################
# SlidingWindowCurve
###############################################################################


class SlidingWindowCurve(ParametricCurve):
    """
    Curve built from overlapping windows of consecutive control points.

    Every window holds ``WINDOW_SIZE`` points and is flattened over t in [0, 1].
    The next window starts one index later: the sequencer state is saved before
    a window is read and restored afterwards, then advanced by one.
    With n points there are ``n - WINDOW_SIZE + 1`` windows.
    """

    WINDOW_SIZE = 4

    def __init__(self, control_path: ControlPath, sequencer: IndexSequencer):
        super().__init__(control_path, sequencer)
        self._window: Optional[NDArray[np.float64]] = None

    def min_points(self) -> int:
        return self.WINDOW_SIZE

    def _enter_window(self, window_index: int, num_windows: int) -> None:
        """Hook called before a window is evaluated."""

    def _check_points(self) -> int:
        self._check_sequencer_range()
        num_points = self._sequencer.total_length()
        if num_points < self.min_points():
            raise InvalidCurveState(
                f"{type(self).__name__} needs at least {self.min_points()} points, got {num_points}"
            )
        return num_points

    def _iter_windows(self, dimension: int) -> Iterator[NDArray[np.float64]]:
        self._sequencer.reset()
        while True:
            state = self._sequencer.save()
            window = self._read_window(self.WINDOW_SIZE, dimension)
            if window is None:
                return
            self._sequencer.restore(state)
            self._sequencer.next()
            yield window

    def _prepare(self, dimension: int, section: int) -> None:
        num_windows = self._check_points() - self.WINDOW_SIZE + 1
        if section < 0 or section >= num_windows:
            raise InvalidArgument(f"section must be in [0, {num_windows}), got {section}")
        for index, window in enumerate(self._iter_windows(dimension)):
            if index == section:
                self._window = window
                self._enter_window(index, num_windows)
                return

    def append_to(self, output: MultiPath) -> None:
        num_windows = self._check_points() - self.WINDOW_SIZE + 1
        dim = output.dimension
        start_count = output.num_points

        for index, window in enumerate(self._iter_windows(dim)):
            self._window = window
            self._enter_window(index, num_windows)
            if index == 0:
                start = np.zeros(dim + 1, dtype=np.float64)
                self.eval(start)
                self._emit_start(output, start)
            flatten(self, 0.0, 1.0, output)
        self._log_appended(output, start_count, num_windows)

    def reset_memory(self) -> None:
        self._window = None
