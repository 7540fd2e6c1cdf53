"""Draw every curve type over one set of control points into a single SVG page."""

from __future__ import annotations

import logging
import os

from curvepath.bezier import BezierCurve
from curvepath.bspline import BSpline, NURBSpline
from curvepath.cardinal import CardinalSpline, CatmullRomSpline
from curvepath.common import KnotVectorType
from curvepath.control_path import ControlPath, Point
from curvepath.cubic_bspline import CubicBSpline
from curvepath.lagrange import LagrangeCurve
from curvepath.multipath import ShapeMultiPath
from curvepath.natural_cubic import NaturalCubicSpline
from curvepath.page import CurveSvgPage
from curvepath.polyline import Polyline
from curvepath.sequencer import IndexSequencer

OUTPUT_FILENAME = "data/output/example/svg/curves/curve_gallery.svg"

# zig-zag of 8 points, repeated once per row with an y-offset
ZIG_ZAG = [(10, 0), (30, 25), (50, 0), (70, 25), (90, 0), (110, 25), (130, 0), (150, 25)]
ROW_HEIGHT = 32


def build_rows():
    """Return (label, control path, curve) for every curve type, each in its own row."""
    rows = []
    factories = [
        ("Polyline", Polyline),
        ("BezierCurve", BezierCurve),
        ("BSpline", BSpline),
        ("NURBSpline", NURBSpline),
        ("CardinalSpline", CardinalSpline),
        ("CatmullRomSpline", CatmullRomSpline),
        ("CubicBSpline", CubicBSpline),
        ("NaturalCubicSpline", NaturalCubicSpline),
        ("LagrangeCurve", LagrangeCurve),
    ]
    for row, (label, factory) in enumerate(factories):
        y_offset = 10 + row * ROW_HEIGHT
        control_path = ControlPath(Point(x, y + y_offset) for x, y in ZIG_ZAG)
        curve = factory(control_path, IndexSequencer.full_range(control_path.num_points))
        if isinstance(curve, NURBSpline):
            curve.weight_vector = [1, 1, 4, 1, 1, 4, 1, 1]
        if isinstance(curve, BSpline):
            curve.knot_vector_type = KnotVectorType.UNIFORM_CLAMPED
        if isinstance(curve, CardinalSpline):
            curve.alpha = 1.0
        if isinstance(curve, CubicBSpline):
            curve.interpolate_endpoints = True
        if isinstance(curve, LagrangeCurve):
            curve.interpolate_first = True
            curve.interpolate_last = True
        control_path.add_curve(curve)
        rows.append((label, control_path, curve))
    return rows


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    page = CurveSvgPage(160, 10 + 9 * ROW_HEIGHT + 20)
    for label, control_path, _curve in build_rows():
        output = ShapeMultiPath(flatness=0.05)
        control_path.append_curves_to(output)
        bounds = output.bounds()
        print(f"{label:20s} {output.num_points:4d} points, bounds {bounds}")
        page.add_multipath(output, stroke="black", stroke_width=0.3)
        page.add_control_points(control_path, radius=0.8)

    os.makedirs(os.path.dirname(OUTPUT_FILENAME), exist_ok=True)
    print(f"save file {OUTPUT_FILENAME} ...")
    page.save_as(OUTPUT_FILENAME, include_debug_layer=True, pretty=True, indent=2)
    print("save done.")


if __name__ == "__main__":
    main()
