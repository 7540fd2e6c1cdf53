"""Numeric geometry helpers used by the flattening engine and the output buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

ArrayLike = Union[Sequence[float], NDArray[np.float64]]


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to point and segment handling."""

    @staticmethod
    def pt_seg_dist_sq(
        a: ArrayLike, b: ArrayLike, p: ArrayLike, closest: Optional[NDArray[np.float64]] = None
    ) -> float:
        """
        Squared distance between the point p and the segment (a, b) in n dimensions.

        The dimension is taken from ``a``; ``b`` and ``p`` may carry extra trailing
        coordinates (for instance the parametric value of a curve sample), which are ignored.

        Args:
            a: First segment point.
            b: Second segment point.
            p: The point to measure.
            closest: Optional array of length >= dimension + 1. Receives the closest
                point on the segment followed by its segment parameter in [0, 1].

        Returns:
            float: the squared distance
        """
        a_arr = np.asarray(a, dtype=np.float64)
        dim = a_arr.shape[0]
        b_arr = np.asarray(b, dtype=np.float64)[:dim]
        p_arr = np.asarray(p, dtype=np.float64)[:dim]

        # non-finite input yields NaN, which the caller checks for
        with np.errstate(invalid="ignore", over="ignore"):
            direction = b_arr - a_arr
            length_sq = float(np.dot(direction, direction))
            t = 0.0
            if length_sq != 0.0:
                t = float(np.dot(direction, p_arr - a_arr)) / length_sq
                if t < 0.0:
                    t = 0.0
                elif t > 1.0:
                    t = 1.0

            nearest = a_arr + t * direction
            if closest is not None:
                closest[:dim] = nearest
                closest[dim] = t

            diff = p_arr - nearest
            return float(np.dot(diff, diff))

    @staticmethod
    def pt_line_dist_sq(a: ArrayLike, b: ArrayLike, p: ArrayLike) -> float:
        """Squared distance between the point p and the infinite line through a and b."""
        a_arr = np.asarray(a, dtype=np.float64)
        dim = a_arr.shape[0]
        direction = np.asarray(b, dtype=np.float64)[:dim] - a_arr
        offset = np.asarray(p, dtype=np.float64)[:dim] - a_arr
        length_sq = float(np.dot(direction, direction))
        t = float(np.dot(direction, offset)) / length_sq if length_sq != 0.0 else 0.0
        diff = offset - t * direction
        return float(np.dot(diff, diff))

    @staticmethod
    def pt_seg_dist_sq_many(
        starts: NDArray[np.float64], ends: NDArray[np.float64], p: ArrayLike
    ) -> NDArray[np.float64]:
        """Vectorized squared distances between p and each segment (starts[i], ends[i]).

        Args:
            starts: Array of shape (n, dim) with the segment start points.
            ends: Array of shape (n, dim) with the segment end points.
            p: The point to measure, at least dim coordinates.

        Returns:
            NDArray[np.float64] of shape (n,)
        """
        dim = starts.shape[1]
        p_arr = np.asarray(p, dtype=np.float64)[:dim]
        direction = ends - starts
        length_sq = np.einsum("ij,ij->i", direction, direction)
        offset = p_arr - starts
        dots = np.einsum("ij,ij->i", direction, offset)
        t = np.divide(dots, length_sq, out=np.zeros_like(dots), where=length_sq != 0.0)
        np.clip(t, 0.0, 1.0, out=t)
        diff = offset - t[:, None] * direction
        return np.einsum("ij,ij->i", diff, diff)

    @staticmethod
    def point_crossings_for_line(px: float, py: float, x0: float, y0: float, x1: float, y1: float) -> int:
        """
        Count how often the segment (x0, y0)-(x1, y1) crosses the ray extending right from (px, py).

        Returns +1 for a crossing with increasing y, -1 for decreasing y and 0 if the
        segment does not cross the ray. A point on the segment counts as no crossing.
        """
        if py < y0 and py < y1:
            return 0
        if py >= y0 and py >= y1:
            return 0
        if px >= x0 and px >= x1:
            return 0
        if px < x0 and px < x1:
            return 1 if y0 < y1 else -1
        x_intercept = x0 + (py - y0) * (x1 - x0) / (y1 - y0)
        if px >= x_intercept:
            return 0
        return 1 if y0 < y1 else -1


###############################################################################
# Box
###############################################################################
@dataclass(frozen=True)
class Box:
    """Axis aligned bounding rectangle of a planar path, ``xmin <= xmax`` and ``ymin <= ymax``."""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        if self.xmin > self.xmax:
            xmin, xmax = self.xmax, self.xmin
            object.__setattr__(self, "xmin", xmin)
            object.__setattr__(self, "xmax", xmax)
        if self.ymin > self.ymax:
            ymin, ymax = self.ymax, self.ymin
            object.__setattr__(self, "ymin", ymin)
            object.__setattr__(self, "ymax", ymax)

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax)"""
        return self.xmin, self.ymin, self.xmax, self.ymax

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def __str__(self):
        return f"Box({self.xmin:g}, {self.ymin:g}, {self.xmax:g}, {self.ymax:g})"
