"""Control points and the control path that curves share."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from curvepath.exceptions import InvalidArgument, InvalidCurveState

if TYPE_CHECKING:
    from curvepath.curve import Curve
    from curvepath.multipath import MultiPath


###############################################################################
# Point
###############################################################################


class Point:
    """A mutable n-dimensional point.

    Curves keep references to Point objects through the ControlPath, so every
    change of a location is visible to all curves the next time they are appended.
    """

    __slots__ = ("_location",)

    def __init__(self, *coords: float):
        self._location: NDArray[np.float64] = np.array(coords, dtype=np.float64)

    @classmethod
    def from_sequence(cls, coords: Union[Sequence[float], NDArray[np.float64]]) -> Point:
        """Create a Point from any sequence of coordinates."""
        return cls(*np.asarray(coords, dtype=np.float64).ravel())

    @property
    def location(self) -> NDArray[np.float64]:
        """The live coordinate array of this point."""
        return self._location

    @location.setter
    def location(self, coords: Union[Sequence[float], NDArray[np.float64]]) -> None:
        self.set_location(coords)

    def set_location(self, coords: Union[Sequence[float], NDArray[np.float64]]) -> None:
        """Replace the coordinates; the dimension may change."""
        if coords is None:
            raise InvalidArgument("Location cannot be None.")
        self._location = np.array(coords, dtype=np.float64).ravel()

    @property
    def dimension(self) -> int:
        return int(self._location.shape[0])

    def __repr__(self) -> str:
        return f"Point({', '.join(f'{c:g}' for c in self._location)})"


###############################################################################
# ControlPath
###############################################################################


class ControlPath:
    """Ordered store of control points plus the curves defined over them.

    Indices are positional. Inserting or removing a point shifts all later
    indices by one; index sequencers built before such an edit have to be
    rebuilt by the caller.
    """

    def __init__(self, points: Iterable[Point] = ()):
        self._points: List[Point] = []
        self._curves: List[Curve] = []
        for point in points:
            self.add_point(point)

    @staticmethod
    def _check_index(index: int, size: int, kind: str) -> None:
        if index < 0 or index >= size:
            raise IndexError(f"{kind} index {index} out of range [0, {size})")

    # ------------------------------------------------------------------ points

    def add_point(self, point: Point) -> None:
        if point is None:
            raise InvalidArgument("Point cannot be None.")
        self._points.append(point)

    def insert_point(self, point: Point, index: int) -> None:
        if point is None:
            raise InvalidArgument("Point cannot be None.")
        if index < 0 or index > len(self._points):
            raise IndexError(f"insert index {index} out of range [0, {len(self._points)}]")
        self._points.insert(index, point)

    def set_point(self, point: Point, index: int) -> Point:
        """Replace the point at index and return the old one."""
        if point is None:
            raise InvalidArgument("Point cannot be None.")
        self._check_index(index, len(self._points), "point")
        old = self._points[index]
        self._points[index] = point
        return old

    def get_point(self, index: int) -> Point:
        self._check_index(index, len(self._points), "point")
        return self._points[index]

    def remove_point(self, point_or_index: Union[Point, int]) -> None:
        """Remove a point by identity or by index. Unknown points are ignored."""
        if isinstance(point_or_index, Point):
            for i, point in enumerate(self._points):
                if point is point_or_index:
                    del self._points[i]
                    return
            return
        self._check_index(point_or_index, len(self._points), "point")
        del self._points[point_or_index]

    @property
    def num_points(self) -> int:
        return len(self._points)

    @property
    def points(self) -> List[Point]:
        """A shallow copy of the point list (the Point objects are shared)."""
        return list(self._points)

    def locations(self, indices: Iterable[int], dimension: int) -> NDArray[np.float64]:
        """Gather the current coordinates of the given points.

        Args:
            indices: Point indices, typically produced by an IndexSequencer.
            dimension: Number of leading coordinates to take from each point.

        Returns:
            NDArray[np.float64] of shape (len(indices), dimension)

        Raises:
            InvalidCurveState: If a point has fewer than ``dimension`` coordinates.
        """
        rows = []
        for index in indices:
            location = self._points[index].location
            if location.shape[0] < dimension:
                raise InvalidCurveState(
                    f"Point {index} has dimension {location.shape[0]} but {dimension} is required"
                )
            rows.append(location[:dimension])
        if not rows:
            return np.empty((0, dimension), dtype=np.float64)
        return np.array(rows, dtype=np.float64)

    # ------------------------------------------------------------------ curves

    def add_curve(self, curve: Curve) -> None:
        if curve is None:
            raise InvalidArgument("Curve cannot be None.")
        self._curves.append(curve)

    def insert_curve(self, curve: Curve, index: int) -> None:
        if curve is None:
            raise InvalidArgument("Curve cannot be None.")
        if index < 0 or index > len(self._curves):
            raise IndexError(f"insert index {index} out of range [0, {len(self._curves)}]")
        self._curves.insert(index, curve)

    def set_curve(self, curve: Curve, index: int) -> Curve:
        """Replace the curve at index and return the old one."""
        if curve is None:
            raise InvalidArgument("Curve cannot be None.")
        self._check_index(index, len(self._curves), "curve")
        old = self._curves[index]
        self._curves[index] = curve
        return old

    def get_curve(self, index: int) -> Curve:
        self._check_index(index, len(self._curves), "curve")
        return self._curves[index]

    def remove_curve(self, curve_or_index: Union[Curve, int]) -> None:
        """Remove a curve by identity or by index. Unknown curves are ignored."""
        if isinstance(curve_or_index, int):
            self._check_index(curve_or_index, len(self._curves), "curve")
            del self._curves[curve_or_index]
            return
        for i, curve in enumerate(self._curves):
            if curve is curve_or_index:
                del self._curves[i]
                return

    @property
    def num_curves(self) -> int:
        return len(self._curves)

    @property
    def curves(self) -> List[Curve]:
        return list(self._curves)

    def append_curves_to(self, output: MultiPath) -> None:
        """Append every curve of this control path to output, in curve order."""
        for curve in self._curves:
            curve.append_to(output)
