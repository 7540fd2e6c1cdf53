"""Test module for curvepath.multipath

The tests are run using pytest.
"""

import math

import numpy as np
import pytest
import shapely.geometry

from curvepath.common import MultiPathSettings, SegmentType, WindingRule
from curvepath.exceptions import InvalidArgument
from curvepath.multipath import MultiPath, ShapeMultiPath


def _square(path, x, y, size, clockwise=False):
    path.move_to((x, y))
    if clockwise:
        path.line_to((x, y + size))
        path.line_to((x + size, y + size))
        path.line_to((x + size, y))
    else:
        path.line_to((x + size, y))
        path.line_to((x + size, y + size))
        path.line_to((x, y + size))


###############################################################################
# MultiPath Storage Tests
###############################################################################


class TestMultiPathStorage:
    """Test class for the growable point buffer."""

    def test_capacity_doubles(self):
        """Test that the capacity at least doubles when it runs out."""
        path = MultiPath(2, initial_capacity=0)
        capacities = []
        for i in range(5):
            path.line_to((i, i))
            capacities.append(path.capacity)
        assert capacities == [1, 2, 4, 4, 8]
        path.ensure_capacity(100)
        assert path.capacity == 100
        assert path.num_points == 5

    def test_trim_array(self):
        """Test that trimming shrinks the capacity to the number of points."""
        path = MultiPath(3, initial_capacity=16)
        path.move_to((1, 2, 3))
        path.line_to((4, 5, 6))
        path.trim_array()
        assert path.capacity == 2
        np.testing.assert_array_equal(path.points, [[1, 2, 3], [4, 5, 6]])

    def test_first_point_forced_to_move_to(self):
        """Test that a LINE_TO into an empty buffer is stored as MOVE_TO."""
        path = MultiPath(2)
        path.line_to((0, 0))
        path.line_to((1, 0))
        path.move_to((5, 5))
        assert path.get_type(0) == SegmentType.MOVE_TO
        assert path.get_type(1) == SegmentType.LINE_TO
        assert path.get_type(2) == SegmentType.MOVE_TO
        assert list(path.types) == [0, 1, 0]

    def test_extra_coordinates_truncated(self):
        """Test that only the leading dimension coordinates are stored."""
        path = MultiPath(2)
        path.move_to(np.array([1.0, 2.0, 0.5]))
        np.testing.assert_array_equal(path.get(0), [1.0, 2.0])

    def test_short_point_rejected(self):
        """Test that points with too few coordinates are rejected."""
        path = MultiPath(3)
        with pytest.raises(InvalidArgument):
            path.move_to((1.0, 2.0))

    def test_num_points_recovers_points(self):
        """Test that points beyond a reduced size can be recovered."""
        path = MultiPath(2)
        for i in range(3):
            path.line_to((i, 0))
        path.num_points = 1
        assert len(path) == 1
        path.num_points = 3
        np.testing.assert_array_equal(path.get(2), [2, 0])
        with pytest.raises(IndexError):
            path.num_points = 4
        with pytest.raises(IndexError):
            path.num_points = -1

    def test_clear(self):
        """Test that clear empties the buffer."""
        path = MultiPath(2)
        path.move_to((1, 1))
        path.clear()
        assert path.num_points == 0
        with pytest.raises(IndexError):
            path.num_points = 1

    def test_get_returns_copy(self):
        """Test that the returned point does not alias the buffer."""
        path = MultiPath(2)
        path.move_to((1, 1))
        point = path.get(0)
        point[0] = 99.0
        np.testing.assert_array_equal(path.get(0), [1, 1])

    def test_set_point_and_type(self):
        """Test changing stored points and tags."""
        path = MultiPath(2)
        path.move_to((0, 0))
        path.line_to((1, 1))
        path.set(1, (2, 3))
        path.set_type(1, SegmentType.MOVE_TO)
        np.testing.assert_array_equal(path.get(1), [2, 3])
        assert path.get_type(1) == SegmentType.MOVE_TO

    def test_point_zero_stays_move_to(self):
        """Test that point 0 cannot become a LINE_TO."""
        path = MultiPath(2)
        path.move_to((0, 0))
        with pytest.raises(InvalidArgument):
            path.set_type(0, SegmentType.LINE_TO)

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_index_out_of_range(self, index):
        """Test that accessing a point outside [0, num_points) raises IndexError."""
        path = MultiPath(2)
        path.move_to((0, 0))
        with pytest.raises(IndexError):
            path.get(index)
        with pytest.raises(IndexError):
            path.set(index, (1, 1))

    @pytest.mark.parametrize(
        "dimension, flatness, capacity",
        [(0, 1.0, 2), (2, 0.0, 2), (2, -1.0, 2), (2, 1.0, -1)],
    )
    def test_invalid_construction(self, dimension, flatness, capacity):
        """Test that invalid dimension, flatness or capacity are rejected."""
        with pytest.raises(InvalidArgument):
            MultiPath(dimension, flatness, capacity)

    def test_settings_round_trip(self):
        """Test creating a buffer from settings and reading them back."""
        settings = MultiPathSettings(dimension=3, flatness=0.5, initial_capacity=4)
        path = MultiPath.from_settings(settings)
        assert path.settings == settings
        assert MultiPathSettings.from_dict(settings.to_dict()) == settings
        assert path.capacity == 4


###############################################################################
# MultiPath Distance Tests
###############################################################################


class TestMultiPathDistance:
    """Test class for distance queries."""

    def test_dist_sq_empty(self):
        """Test that a buffer without segments is infinitely far away."""
        path = MultiPath(2)
        assert path.dist_sq((0, 0)) == math.inf
        path.move_to((0, 0))
        assert path.dist_sq((0, 0)) == math.inf

    def test_dist_sq_separate_sub_paths(self):
        """Test that the gap between sub-paths is not treated as a segment."""
        path = MultiPath(2)
        path.move_to((0, 0))
        path.line_to((10, 0))
        path.move_to((100, 100))
        path.line_to((110, 100))
        assert path.dist_sq((105, 103)) == pytest.approx(9.0)
        assert path.dist_sq((5, -2)) == pytest.approx(4.0)
        assert path.dist_sq((55, 50)) == pytest.approx(4525.0)

    def test_dist_sq_3d(self):
        """Test distances in three dimensions."""
        path = MultiPath(3)
        path.move_to((0, 0, 0))
        path.line_to((0, 0, 10))
        assert path.dist_sq((3, 4, 5)) == pytest.approx(25.0)


###############################################################################
# ShapeMultiPath Tests
###############################################################################


class TestShapeMultiPath:
    """Test class for planar shape queries."""

    def test_dimension_below_two_rejected(self):
        """Test that shape queries need two coordinates."""
        with pytest.raises(InvalidArgument):
            ShapeMultiPath(1)

    def test_bounds(self):
        """Test that a trailing MOVE_TO without LINE_TO is not part of the bounds."""
        path = ShapeMultiPath()
        assert path.bounds() is None
        path.move_to((50, 50))
        assert path.bounds() is None
        path.clear()
        _square(path, 0, 0, 10)
        path.move_to((100, 100))
        assert path.bounds().extent == (0.0, 0.0, 10.0, 10.0)

    def test_contains_square(self):
        """Test the inside test of an implicitly closed square."""
        path = ShapeMultiPath()
        _square(path, 0, 0, 10)
        assert path.contains(5, 5)
        assert path.contains(1, 9)
        assert not path.contains(11, 5)
        assert not path.contains(5, -1)

    def test_winding_rules_same_direction(self):
        """Test nested squares drawn in the same direction."""
        path = ShapeMultiPath()
        _square(path, 0, 0, 10)
        _square(path, 3, 3, 4)
        assert path.crossings(5, 5) == 2
        assert not path.contains(5, 5)
        assert path.contains(1, 1)
        path.winding_rule = WindingRule.NON_ZERO
        assert path.contains(5, 5)
        assert path.contains(1, 1)

    def test_winding_rules_opposite_direction(self):
        """Test that an inner square drawn the other way is a hole for both rules."""
        path = ShapeMultiPath()
        _square(path, 0, 0, 10)
        _square(path, 3, 3, 4, clockwise=True)
        assert path.crossings(5, 5) == 0
        assert not path.contains(5, 5)
        path.winding_rule = WindingRule.NON_ZERO
        assert not path.contains(5, 5)
        assert path.contains(1, 1)

    def test_invalid_winding_rule(self):
        """Test that only WindingRule values are accepted."""
        path = ShapeMultiPath()
        with pytest.raises(InvalidArgument):
            path.winding_rule = "even-odd"

    def test_box_queries(self):
        """Test contains_box and intersects_box against a square."""
        path = ShapeMultiPath()
        assert not path.contains_box(0, 0, 1, 1)
        assert not path.intersects_box(0, 0, 1, 1)
        _square(path, 0, 0, 10)
        assert path.contains_box(2, 2, 3, 3)
        assert not path.contains_box(5, 5, 10, 10)
        assert path.intersects_box(5, 5, 10, 10)
        assert not path.intersects_box(20, 20, 1, 1)
        # no corner inside, but the box crosses the square
        assert path.intersects_box(-1, 4, 12, 1)
        assert not path.contains_box(-1, 4, 12, 1)

    def test_planar_dist_sq(self):
        """Test the distance in the plane of the basis vectors."""
        path = ShapeMultiPath()
        _square(path, 0, 0, 10)
        assert path.planar_dist_sq(5, 13) == pytest.approx(9.0)
        assert ShapeMultiPath().planar_dist_sq(0, 0) == math.inf

    def test_basis_vectors_select_plane(self):
        """Test a square drawn in the x-z plane of a 3D buffer."""
        path = ShapeMultiPath(3)
        path.basis_vectors = (0, 2)
        for x, z in [(0, 0), (10, 0), (10, 10), (0, 10)]:
            path.line_to((x, 42.0 + x, z))
        assert path.contains(5, 5)
        assert not path.contains(5, 15)
        assert path.bounds().extent == (0.0, 0.0, 10.0, 10.0)
        assert list(path.iter_segments())[1] == (SegmentType.LINE_TO, 10.0, 0.0)
        with pytest.raises(InvalidArgument):
            path.basis_vectors = (0, 3)

    def test_sub_paths_and_shapely(self):
        """Test splitting into sub-paths and the shapely conversion."""
        path = ShapeMultiPath()
        assert path.sub_paths() == []
        assert path.to_shapely().is_empty
        _square(path, 0, 0, 10)
        path.move_to((20, 20))
        path.line_to((30, 20))
        path.move_to((50, 50))

        sub_paths = path.sub_paths()
        assert [chunk.shape[0] for chunk in sub_paths] == [4, 2, 1]

        geometry = path.to_shapely()
        assert isinstance(geometry, shapely.geometry.MultiLineString)
        assert len(geometry.geoms) == 2
        assert geometry.length == pytest.approx(40.0)
