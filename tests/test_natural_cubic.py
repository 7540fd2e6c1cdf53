"""Test module for curvepath.natural_cubic

The tests are run using pytest.
"""

import numpy as np
import pytest

from curvepath.control_path import ControlPath, Point
from curvepath.exceptions import InvalidArgument, InvalidCurveState
from curvepath.multipath import MultiPath
from curvepath.natural_cubic import NaturalCubicSpline, natural_cubic_coefficients
from curvepath.sequencer import IndexSequencer

QUAD = [(0, 0), (4, 0), (5, 4), (0, 3)]


def make_curve(coords, closed=False):
    control_path = ControlPath(Point(*c) for c in coords)
    curve = NaturalCubicSpline(control_path, IndexSequencer.full_range(control_path.num_points))
    curve.closed = closed
    return curve


###############################################################################
# Coefficient Tests
###############################################################################


class TestCoefficients:
    """Test class for the spline coefficients."""

    def test_two_points_is_line(self):
        """Test that two points give the straight segment."""
        coeffs = natural_cubic_coefficients(np.array([[0.0, 0.0], [2.0, 4.0]]), closed=False)
        assert coeffs.shape == (1, 4, 2)
        np.testing.assert_allclose(coeffs[0], [[0, 0], [2, 4], [0, 0], [0, 0]], atol=1e-12)

    @pytest.mark.parametrize("closed", [False, True])
    def test_segments_join(self, closed):
        """Test position, slope and curvature continuity at the inner joins."""
        pts = np.array(QUAD, dtype=np.float64)
        coeffs = natural_cubic_coefficients(pts, closed)
        assert coeffs.shape[0] == (4 if closed else 3)
        for seg, nxt in zip(coeffs[:-1], coeffs[1:]):
            w, x, y, z = seg
            np.testing.assert_allclose(w + x + y + z, nxt[0], atol=1e-12)
            np.testing.assert_allclose(x + 2 * y + 3 * z, nxt[1], atol=1e-12)
            np.testing.assert_allclose(2 * y + 6 * z, 2 * nxt[2], atol=1e-12)

    def test_open_ends_have_zero_curvature(self):
        """Test the natural end conditions of an open spline."""
        coeffs = natural_cubic_coefficients(np.array(QUAD, dtype=np.float64), closed=False)
        np.testing.assert_allclose(2 * coeffs[0, 2], 0.0, atol=1e-12)
        w, x, y, z = coeffs[-1]
        np.testing.assert_allclose(2 * y + 6 * z, 0.0, atol=1e-12)

    def test_closed_smooth_across_join(self):
        """Test slope continuity from the last segment back to the first."""
        coeffs = natural_cubic_coefficients(np.array(QUAD, dtype=np.float64), closed=True)
        w, x, y, z = coeffs[-1]
        np.testing.assert_allclose(w + x + y + z, QUAD[0], atol=1e-12)
        np.testing.assert_allclose(x + 2 * y + 3 * z, coeffs[0, 1], atol=1e-12)
        np.testing.assert_allclose(2 * y + 6 * z, 2 * coeffs[0, 2], atol=1e-12)


###############################################################################
# NaturalCubicSpline Tests
###############################################################################


class TestNaturalCubicSpline:
    """Test class for NaturalCubicSpline functionality."""

    def test_collinear_open_is_straight(self):
        """Test that collinear points give a straight line."""
        curve = make_curve([(0, 0), (1, 1), (3, 3), (4, 4)])
        output = MultiPath(2, flatness=0.001)
        curve.append_to(output)
        np.testing.assert_allclose(output.points[:, 0], output.points[:, 1], atol=1e-12)
        np.testing.assert_allclose(output.get(output.num_points - 1), [4, 4], atol=1e-12)

    def test_passes_through_points(self):
        """Test that segment i starts at point i."""
        curve = make_curve(QUAD)
        assert curve.num_segments() == 3
        for i in range(3):
            np.testing.assert_allclose(curve.evaluate(0.0, section=i), QUAD[i], atol=1e-12)
        np.testing.assert_allclose(curve.evaluate(1.0, section=2), QUAD[3], atol=1e-12)

    def test_closed_wraps_to_start(self):
        """Test that the closing segment returns to the first point."""
        curve = make_curve(QUAD, closed=True)
        assert curve.num_segments() == 4
        np.testing.assert_allclose(curve.evaluate(1.0, section=3), QUAD[0], atol=1e-12)

        output = MultiPath(2, flatness=0.01)
        curve.append_to(output)
        np.testing.assert_allclose(output.get(0), QUAD[0], atol=1e-12)
        np.testing.assert_allclose(output.get(output.num_points - 1), QUAD[0], atol=1e-12)

    def test_open_ends_at_last_point(self):
        """Test that the open curve does not close."""
        curve = make_curve(QUAD)
        output = MultiPath(2, flatness=0.01)
        curve.append_to(output)
        np.testing.assert_allclose(output.get(output.num_points - 1), QUAD[-1], atol=1e-12)

    def test_section_out_of_range(self):
        """Test that the open curve has no closing segment."""
        curve = make_curve(QUAD)
        with pytest.raises(InvalidArgument):
            curve.evaluate(0.5, section=3)

    def test_single_point(self):
        """Test that a single point raises InvalidCurveState."""
        curve = make_curve([(1, 1)])
        with pytest.raises(InvalidCurveState):
            curve.append_to(MultiPath(2))
