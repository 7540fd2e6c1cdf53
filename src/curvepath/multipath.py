"""Output buffers receiving the flattened points of curves."""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import shapely.geometry
from numpy.typing import NDArray

from curvepath.common import (
    DEFAULT_FLATNESS,
    DEFAULT_INITIAL_CAPACITY,
    MultiPathSettings,
    SegmentType,
    WindingRule,
)
from curvepath.exceptions import InvalidArgument
from curvepath.geom import Box, GeomMath

PointLike = Union[Sequence[float], NDArray[np.float64]]


###############################################################################
# MultiPath
###############################################################################


class MultiPath:
    """Growable sequence of n-dimensional points tagged MOVE_TO or LINE_TO.

    Points are stored in a ``(capacity, dimension)`` float64 array, the tags in
    an int8 array holding SegmentType values. The capacity at least doubles
    when it runs out. The first point is always a MOVE_TO.

    Points handed to ``move_to``/``line_to`` may be longer than the dimension;
    only the leading ``dimension`` coordinates are stored.
    """

    def __init__(
        self,
        dimension: int,
        flatness: float = DEFAULT_FLATNESS,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
    ):
        if dimension <= 0:
            raise InvalidArgument(f"dimension must be > 0, got {dimension}")
        if initial_capacity < 0:
            raise InvalidArgument(f"initial_capacity must be >= 0, got {initial_capacity}")
        self._dimension = int(dimension)
        self._flatness = DEFAULT_FLATNESS
        self.flatness = flatness
        self._initial_capacity = int(initial_capacity)
        self._points: NDArray[np.float64] = np.zeros((initial_capacity, self._dimension), dtype=np.float64)
        self._types: NDArray[np.int8] = np.zeros(initial_capacity, dtype=np.int8)
        self._size = 0
        # number of slots ever written; num_points may be set back up to this value
        self._filled = 0

    @classmethod
    def from_settings(cls, settings: MultiPathSettings) -> MultiPath:
        return cls(settings.dimension, settings.flatness, settings.initial_capacity)

    @property
    def settings(self) -> MultiPathSettings:
        return MultiPathSettings(
            dimension=self._dimension,
            flatness=self._flatness,
            initial_capacity=self._initial_capacity,
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def flatness(self) -> float:
        """Distance tolerance used when curves are flattened into this buffer.

        Smaller values produce more points. When drawing, a flatness inversely
        proportional to the scale keeps the rendered error constant.
        """
        return self._flatness

    @flatness.setter
    def flatness(self, value: float) -> None:
        if not value > 0:
            raise InvalidArgument(f"flatness must be > 0, got {value}")
        self._flatness = float(value)

    # ------------------------------------------------------------------ storage

    @property
    def capacity(self) -> int:
        return int(self._points.shape[0])

    def ensure_capacity(self, capacity: int) -> None:
        """Grow the arrays to hold at least capacity points (at least doubling)."""
        current = self._points.shape[0]
        if current >= capacity:
            return
        new_capacity = max(2 * current, capacity)
        points = np.zeros((new_capacity, self._dimension), dtype=np.float64)
        types = np.zeros(new_capacity, dtype=np.int8)
        points[: self._filled] = self._points[: self._filled]
        types[: self._filled] = self._types[: self._filled]
        self._points = points
        self._types = types

    def trim_array(self) -> None:
        """Shrink the arrays to exactly num_points entries."""
        if self._size < self._points.shape[0]:
            self._points = self._points[: self._size].copy()
            self._types = self._types[: self._size].copy()
        self._filled = self._size

    @property
    def num_points(self) -> int:
        return self._size

    @num_points.setter
    def num_points(self, n: int) -> None:
        """Move the size counter; points beyond it are kept and can be recovered."""
        if n < 0 or n > self._filled:
            raise IndexError(f"num_points must be in [0, {self._filled}], got {n}")
        self._size = n

    def __len__(self) -> int:
        return self._size

    def clear(self) -> None:
        self._size = 0
        self._filled = 0

    # ------------------------------------------------------------------ append

    def _as_point(self, p: PointLike) -> NDArray[np.float64]:
        if p is None:
            raise InvalidArgument("Point cannot be None.")
        arr = np.asarray(p, dtype=np.float64).ravel()
        if arr.shape[0] < self._dimension:
            raise InvalidArgument(f"point needs at least {self._dimension} coordinates, got {arr.shape[0]}")
        return arr[: self._dimension]

    def _append(self, p: PointLike, seg_type: SegmentType) -> None:
        coords = self._as_point(p)
        if self._size == 0:
            seg_type = SegmentType.MOVE_TO
        self.ensure_capacity(self._size + 1)
        self._points[self._size] = coords
        self._types[self._size] = seg_type
        self._size += 1
        self._filled = self._size

    def move_to(self, p: PointLike) -> None:
        self._append(p, SegmentType.MOVE_TO)

    def line_to(self, p: PointLike) -> None:
        """Append a LINE_TO point. The very first point of the buffer becomes a MOVE_TO."""
        self._append(p, SegmentType.LINE_TO)

    # ------------------------------------------------------------------ access

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._size:
            raise IndexError(f"index {index} out of range [0, {self._size})")

    def get(self, index: int) -> NDArray[np.float64]:
        """Return a copy of the point at index."""
        self._check_index(index)
        return self._points[index].copy()

    def set(self, index: int, p: PointLike) -> None:
        self._check_index(index)
        self._points[index] = self._as_point(p)

    def get_type(self, index: int) -> SegmentType:
        self._check_index(index)
        return SegmentType(int(self._types[index]))

    def set_type(self, index: int, seg_type: SegmentType) -> None:
        """Change the tag of a point. Index 0 must stay a MOVE_TO."""
        if seg_type not in (SegmentType.MOVE_TO, SegmentType.LINE_TO):
            raise InvalidArgument(f"unknown segment type {seg_type!r}")
        self._check_index(index)
        if index == 0 and seg_type != SegmentType.MOVE_TO:
            raise InvalidArgument("type of point 0 must always be MOVE_TO")
        self._types[index] = seg_type

    @property
    def points(self) -> NDArray[np.float64]:
        """Copy of the stored points, shape (num_points, dimension)."""
        return self._points[: self._size].copy()

    @property
    def types(self) -> NDArray[np.int8]:
        """Copy of the stored SegmentType values, shape (num_points,)."""
        return self._types[: self._size].copy()

    def _line_segments(self, columns: Optional[List[int]] = None) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        pts = self._points[: self._size]
        if columns is not None:
            pts = pts[:, columns]
        if self._size < 2:
            empty = np.empty((0, pts.shape[1]), dtype=np.float64)
            return empty, empty
        mask = self._types[1 : self._size] == SegmentType.LINE_TO
        return pts[:-1][mask], pts[1:][mask]

    def dist_sq(self, p: PointLike) -> float:
        """Minimum squared distance from p to the LINE_TO segments of this buffer.

        Returns ``math.inf`` if the buffer holds no segment.
        """
        coords = self._as_point(p)
        starts, ends = self._line_segments()
        if starts.shape[0] == 0:
            return math.inf
        return float(GeomMath.pt_seg_dist_sq_many(starts, ends, coords).min())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(dimension={self._dimension}, flatness={self._flatness}, "
            f"num_points={self._size}, capacity={self.capacity})"
        )


###############################################################################
# ShapeMultiPath
###############################################################################


class ShapeMultiPath(MultiPath):
    """MultiPath with planar shape queries.

    Two coordinates, selected by the basis vectors, are interpreted as x and y.
    Every sub-path is implicitly closed for the inside tests.
    """

    def __init__(
        self,
        dimension: int = 2,
        flatness: float = DEFAULT_FLATNESS,
        initial_capacity: int = DEFAULT_INITIAL_CAPACITY,
    ):
        if dimension < 2:
            raise InvalidArgument(f"dimension must be >= 2, got {dimension}")
        super().__init__(dimension, flatness, initial_capacity)
        self._ai0 = 0
        self._ai1 = 1
        self._winding_rule = WindingRule.EVEN_ODD

    @property
    def basis_vectors(self) -> Tuple[int, int]:
        """Indices of the coordinates used as x-axis and y-axis."""
        return self._ai0, self._ai1

    @basis_vectors.setter
    def basis_vectors(self, axes: Tuple[int, int]) -> None:
        ai0, ai1 = int(axes[0]), int(axes[1])
        if not (0 <= ai0 < self._dimension and 0 <= ai1 < self._dimension):
            raise InvalidArgument(f"basis vectors must be in [0, {self._dimension}), got {axes!r}")
        self._ai0 = ai0
        self._ai1 = ai1

    @property
    def winding_rule(self) -> WindingRule:
        return self._winding_rule

    @winding_rule.setter
    def winding_rule(self, rule: WindingRule) -> None:
        if not isinstance(rule, WindingRule):
            raise InvalidArgument(f"winding rule must be a WindingRule, got {rule!r}")
        self._winding_rule = rule

    def _planar(self) -> NDArray[np.float64]:
        return self._points[: self._size][:, [self._ai0, self._ai1]]

    def iter_segments(self) -> Iterator[Tuple[SegmentType, float, float]]:
        """Yield ``(type, x, y)`` for every point."""
        for i in range(self._size):
            yield (
                SegmentType(int(self._types[i])),
                float(self._points[i, self._ai0]),
                float(self._points[i, self._ai1]),
            )

    def sub_paths(self) -> List[NDArray[np.float64]]:
        """Planar coordinates of each sub-path, split at every MOVE_TO."""
        planar = self._planar()
        if self._size == 0:
            return []
        starts = np.flatnonzero(self._types[: self._size] == SegmentType.MOVE_TO)
        return list(np.split(planar, starts[1:]))

    def bounds(self) -> Optional[Box]:
        """Bounding box of the drawn points, or None if nothing is drawn.

        LINE_TO points always count; a MOVE_TO point counts only if a LINE_TO follows it.
        """
        if self._size == 0:
            return None
        types = self._types[: self._size]
        used = types == SegmentType.LINE_TO
        used[:-1] |= (types[:-1] == SegmentType.MOVE_TO) & (types[1:] == SegmentType.LINE_TO)
        if not used.any():
            return None
        planar = self._planar()[used]
        xmin, ymin = planar.min(axis=0)
        xmax, ymax = planar.max(axis=0)
        return Box(float(xmin), float(ymin), float(xmax), float(ymax))

    def planar_dist_sq(self, x: float, y: float) -> float:
        """Minimum squared distance from (x, y) to the LINE_TO segments, ``math.inf`` if none."""
        starts, ends = self._line_segments([self._ai0, self._ai1])
        if starts.shape[0] == 0:
            return math.inf
        return float(GeomMath.pt_seg_dist_sq_many(starts, ends, (x, y)).min())

    def crossings(self, x: float, y: float) -> int:
        """Signed number of path crossings of the ray extending right from (x, y)."""
        crossings = 0
        mov_x = mov_y = cur_x = cur_y = 0.0
        for seg_type, px, py in self.iter_segments():
            if seg_type == SegmentType.MOVE_TO:
                if cur_y != mov_y:
                    crossings += GeomMath.point_crossings_for_line(x, y, cur_x, cur_y, mov_x, mov_y)
                mov_x = cur_x = px
                mov_y = cur_y = py
            else:
                crossings += GeomMath.point_crossings_for_line(x, y, cur_x, cur_y, px, py)
                cur_x = px
                cur_y = py
        if cur_y != mov_y:
            crossings += GeomMath.point_crossings_for_line(x, y, cur_x, cur_y, mov_x, mov_y)
        return crossings

    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside the implicitly closed sub-paths under the winding rule."""
        cross = self.crossings(x, y)
        if self._winding_rule == WindingRule.NON_ZERO:
            return cross != 0
        return (cross & 1) != 0

    @staticmethod
    def _corners(x: float, y: float, w: float, h: float) -> List[Tuple[float, float]]:
        return [(x, y), (x, y + h), (x + w, y), (x + w, y + h)]

    def contains_box(self, x: float, y: float, w: float, h: float) -> bool:
        """True if all four corners are inside and no segment touches the box outline."""
        if self._size == 0:
            return False
        if not all(self.contains(cx, cy) for cx, cy in self._corners(x, y, w, h)):
            return False
        outline = shapely.geometry.box(x, y, x + w, y + h).exterior
        return not self.to_shapely().intersects(outline)

    def intersects_box(self, x: float, y: float, w: float, h: float) -> bool:
        """True if any corner is inside or any segment meets the box area."""
        if any(self.contains(cx, cy) for cx, cy in self._corners(x, y, w, h)):
            return True
        if self._size == 0:
            return False
        area = shapely.geometry.box(x, y, x + w, y + h)
        return self.to_shapely().intersects(area)

    def to_shapely(self) -> shapely.geometry.MultiLineString:
        """The drawn sub-paths as a shapely MultiLineString (single points are skipped)."""
        lines = [chunk for chunk in self.sub_paths() if chunk.shape[0] >= 2]
        if not lines:
            return shapely.geometry.MultiLineString()
        return shapely.geometry.MultiLineString(lines)
