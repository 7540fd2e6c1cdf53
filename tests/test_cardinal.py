"""Test module for curvepath.cardinal

The tests are run using pytest.
"""

import numpy as np
import pytest

from curvepath.cardinal import CardinalSpline, CatmullRomSpline
from curvepath.common import SegmentType
from curvepath.control_path import ControlPath, Point
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.geom import GeomMath
from curvepath.multipath import MultiPath
from curvepath.sequencer import IndexSequencer

S_WINDOW = [(0, 0), (1, 2), (3, 2), (4, 0)]
WAVE = [(0, 0), (2, 3), (4, 0), (6, 3), (8, 0), (10, 3)]


def make_curve(cls, coords, pairs=None):
    control_path = ControlPath(Point(*c) for c in coords)
    sequencer = IndexSequencer(pairs) if pairs else IndexSequencer.full_range(control_path.num_points)
    return cls(control_path, sequencer)


###############################################################################
# CatmullRomSpline Tests
###############################################################################


class TestCatmullRomSpline:
    """Test class for CatmullRomSpline functionality."""

    def test_single_window(self):
        """Test that one window runs from the second to the third point with few points."""
        curve = make_curve(CatmullRomSpline, S_WINDOW)
        output = MultiPath(2, flatness=0.01)
        curve.append_to(output)
        np.testing.assert_allclose(output.get(0), [1, 2])
        np.testing.assert_allclose(output.get(output.num_points - 1), [3, 2])
        assert 3 <= output.num_points <= 64
        assert output.get_type(0) == SegmentType.MOVE_TO

    def test_single_window_within_flatness(self):
        """Test that the flattened window stays close to the curve."""
        curve = make_curve(CatmullRomSpline, S_WINDOW)
        output = MultiPath(2, flatness=0.01)
        curve.append_to(output)
        points = output.points
        for t in np.linspace(0.0, 1.0, 101):
            p = curve.evaluate(t)
            dist_sq = min(GeomMath.pt_seg_dist_sq(a, b, p) for a, b in zip(points[:-1], points[1:]))
            assert dist_sq <= 0.01 * 0.01

    def test_passes_through_interior_points(self):
        """Test that window k runs from point k + 1 to point k + 2."""
        curve = make_curve(CatmullRomSpline, WAVE)
        for section in range(len(WAVE) - 3):
            np.testing.assert_allclose(curve.evaluate(0.0, section=section), WAVE[section + 1])
            np.testing.assert_allclose(curve.evaluate(1.0, section=section), WAVE[section + 2])

    def test_append_whole_wave(self):
        """Test that all windows are appended as one connected sub-path."""
        curve = make_curve(CatmullRomSpline, WAVE)
        output = MultiPath(2, flatness=0.05)
        curve.append_to(output)
        assert list(output.types).count(SegmentType.MOVE_TO) == 1
        np.testing.assert_allclose(output.get(0), WAVE[1])
        np.testing.assert_allclose(output.get(output.num_points - 1), WAVE[-2])
        for point in WAVE[1:-1]:
            assert output.dist_sq(point) == pytest.approx(0.0, abs=1e-18)

    def test_closed_by_sequencer(self):
        """Test a closed curve by repeating the first three indices."""
        square = [(0, 0), (4, 0), (4, 4), (0, 4)]
        curve = make_curve(CatmullRomSpline, square, pairs=[(0, 3), (0, 2)])
        output = MultiPath(2, flatness=0.05)
        curve.append_to(output)
        np.testing.assert_allclose(output.get(0), square[1])
        np.testing.assert_allclose(output.get(output.num_points - 1), square[1])

    def test_too_few_points(self):
        """Test that a window needs 4 points."""
        curve = make_curve(CatmullRomSpline, S_WINDOW[:3])
        output = MultiPath(2)
        with pytest.raises(InvalidCurveState):
            curve.append_to(output)
        assert output.num_points == 0

    def test_section_out_of_range(self):
        """Test that evaluating a missing window raises InvalidArgument."""
        curve = make_curve(CatmullRomSpline, S_WINDOW)
        with pytest.raises(InvalidArgument):
            curve.evaluate(0.5, section=1)


###############################################################################
# CardinalSpline Tests
###############################################################################


class TestCardinalSpline:
    """Test class for CardinalSpline functionality."""

    @pytest.mark.parametrize("t", [0.0, 0.1, 0.35, 0.5, 0.9, 1.0])
    def test_half_alpha_is_catmull_rom(self, t):
        """Test that alpha 0.5 matches the Catmull-Rom spline."""
        cardinal = make_curve(CardinalSpline, WAVE)
        catmull_rom = make_curve(CatmullRomSpline, WAVE)
        assert cardinal.alpha == 0.5
        for section in range(3):
            np.testing.assert_allclose(
                cardinal.evaluate(t, section=section),
                catmull_rom.evaluate(t, section=section),
                atol=1e-12,
            )

    def test_zero_alpha_is_straight(self):
        """Test that without tangents the window is the straight segment."""
        curve = make_curve(CardinalSpline, S_WINDOW)
        curve.alpha = 0.0
        output = MultiPath(2, flatness=0.01)
        curve.append_to(output)
        np.testing.assert_allclose(output.points[:, 1], 2.0)

    def test_alpha_changes_shape(self):
        """Test that a larger alpha bends the curve further."""
        curve = make_curve(CardinalSpline, S_WINDOW)
        y_half = curve.evaluate(0.5)[1]
        curve.alpha = 1.0
        assert curve.evaluate(0.5)[1] > y_half

    def test_three_dimensions(self):
        """Test evaluation with 3D control points."""
        coords = [(0, 0, 0), (1, 0, 1), (2, 0, 2), (3, 0, 3)]
        curve = make_curve(CardinalSpline, coords)
        output = MultiPath(3, flatness=0.01)
        curve.append_to(output)
        np.testing.assert_allclose(output.points[:, 0], output.points[:, 2])
        np.testing.assert_allclose(output.get(output.num_points - 1), [2, 0, 2])
