"""Adaptive flattening of parametric curves into line segments.

The interval ``[t_min, t_max]`` is split by bisection. A piece is accepted when
the curve point at its parametric midpoint lies closer to the chord than the
flatness of the output buffer. A midpoint that happens to land on the chord
while the curve still bulges elsewhere ("spike") is caught by taking
``curve.sample_limit`` further midpoints towards the left end of the piece;
each of them has to pass the same test.

Pending right ends are kept on an explicit stack, so deep subdivisions never
hit the recursion limit. The first point appended is ``eval(t_min)``, the last
one ``eval(t_max)``, and every point is appended with ``line_to``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

import numpy as np
from numpy.typing import NDArray

from curvepath.exceptions import DegenerateEvaluation, InvalidArgument
from curvepath.geom import GeomMath

if TYPE_CHECKING:
    from curvepath.curve import ParametricCurve
    from curvepath.multipath import MultiPath


def _sample(curve: ParametricCurve, t: float, dim: int) -> NDArray[np.float64]:
    p = np.zeros(dim + 1, dtype=np.float64)
    p[dim] = t
    curve.eval(p)
    return p


def flatten(curve: ParametricCurve, t_min: float, t_max: float, output: MultiPath) -> None:
    """Append a piecewise linear approximation of curve over [t_min, t_max] to output.

    Args:
        curve: The curve to evaluate. Its control points must already be loaded.
        t_min: Start parameter.
        t_max: End parameter.
        output: Receives the points; its dimension and flatness drive the approximation.

    Raises:
        InvalidArgument: If t_min > t_max.
        DegenerateEvaluation: If a distance turns out NaN or infinite, or the
            bisection cannot shrink an interval that still fails the test.
    """
    if t_min > t_max:
        raise InvalidArgument(f"t_min <= t_max required, got [{t_min}, {t_max}]")

    dim = output.dimension
    flat_sq = output.flatness * output.flatness
    sample_limit = curve.sample_limit

    t1 = t_min
    t2 = t_max
    left = _sample(curve, t1, dim)
    stack: List[NDArray[np.float64]] = [_sample(curve, t2, dim)]

    while True:
        m = (t1 + t2) / 2
        mid = _sample(curve, m, dim)
        dist = GeomMath.pt_seg_dist_sq(left[:dim], stack[-1], mid)

        if not math.isfinite(dist):
            raise DegenerateEvaluation(
                f"{type(curve).__name__} produced a NaN or infinite distance at t={m!r}"
            )

        flat = False
        if dist < flat_sq:
            extra: List[NDArray[np.float64]] = []
            mm = m
            for _ in range(sample_limit):
                mm = (t1 + m) / 2
                q = _sample(curve, mm, dim)
                extra.append(q)
                if GeomMath.pt_seg_dist_sq(left[:dim], mid, q) >= flat_sq:
                    break
                m = mm
            else:
                flat = True

            if not flat:
                # continue from the sample that failed
                stack.append(mid)
                stack.extend(extra)
                t2 = mm
                continue

        if flat:
            output.line_to(left)
            output.line_to(mid)
            left = stack.pop()
            if not stack:
                break
            t1 = t2
            t2 = stack[-1][dim]
        elif t2 > m:
            stack.append(mid)
            t2 = m
        else:
            raise DegenerateEvaluation(
                f"{type(curve).__name__} cannot be subdivided below t={t1!r}..{t2!r}"
            )

    output.line_to(left)
