"""Central module containing constants, enums and settings for curve approximation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Tuple

###############################################################################
# Enums
###############################################################################


class SegmentType(IntEnum):
    """Type tag of a point stored in a MultiPath.

    The integer values are stored directly in the numpy type array of the buffer.
    """

    # MoveTo - start a new sub-path at the point
    MOVE_TO = 0
    # LineTo - draw a straight line from the previous point to the point
    LINE_TO = 1


class KnotVectorType(Enum):
    """How a BSpline obtains its knot vector."""

    UNIFORM_CLAMPED = auto()
    UNIFORM_UNCLAMPED = auto()
    NON_UNIFORM = auto()


class WindingRule(Enum):
    """Rule deciding the inside of a self-overlapping planar path."""

    EVEN_ODD = auto()
    NON_ZERO = auto()


class CubicSection(Enum):
    """Position of a four point window inside a CubicBSpline."""

    FIRST = auto()
    SECOND = auto()
    MIDDLE = auto()
    SECOND_LAST = auto()
    LAST = auto()


###############################################################################
# Consts
###############################################################################

DEFAULT_FLATNESS: float = 1.0
DEFAULT_INITIAL_CAPACITY: int = 2
DEFAULT_SAMPLE_LIMIT: int = 1
DEFAULT_DEGREE: int = 3
DEFAULT_ALPHA: float = 0.5

# 1030 choose 515 overflows a float64, so Bezier curves with more points lose terms
BEZIER_FINITE_POINT_LIMIT: int = 1030

DEFAULT_BSPLINE_KNOTS: Tuple[float, ...] = (0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 1.0)
DEFAULT_NURBS_WEIGHTS: Tuple[float, ...] = (1.0, 1.0, 1.0, 1.0)
DEFAULT_LAGRANGE_KNOTS: Tuple[float, ...] = (0.0, 1.0 / 3.0, 2.0 / 3.0, 1.0)


###############################################################################
# MultiPathSettings
###############################################################################


@dataclass(frozen=True)
class MultiPathSettings:
    """Settings of an output buffer.

    Attributes:
        dimension: Number of coordinates stored per point (> 0).
        flatness: Distance tolerance used when flattening curves into the buffer (> 0).
        initial_capacity: Number of point slots allocated up front (>= 0).
    """

    dimension: int = 2
    flatness: float = DEFAULT_FLATNESS
    initial_capacity: int = DEFAULT_INITIAL_CAPACITY

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return {
            "dimension": self.dimension,
            "flatness": self.flatness,
            "initial_capacity": self.initial_capacity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MultiPathSettings":
        """Create MultiPathSettings from a dictionary."""
        return cls(
            dimension=data.get("dimension", 2),
            flatness=data.get("flatness", DEFAULT_FLATNESS),
            initial_capacity=data.get("initial_capacity", DEFAULT_INITIAL_CAPACITY),
        )
