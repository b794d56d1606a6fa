"""Tests for box geometry and wireframe sampling."""

import numpy as np
import pytest

from boxfit.errors import EmptyObservationError, NonPositiveExtentError
from boxfit.geometry.box import (
    BoxParameters,
    as_point_cloud,
    compute_box_edges,
    compute_corners,
    points_in_box_mask,
)
from boxfit.geometry.wireframe import box_to_points, map_box_to_points, num_wireframe_points


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def flat_box():
    """Box used in the wireframe layout checks."""
    return BoxParameters(xc=0.0, yc=0.0, zc=0.0, L=0.5, W=0.25, H=0.1, sigma=0.05)


# =============================================================================
# BoxParameters
# =============================================================================

class TestBoxParameters:
    """Tests for BoxParameters."""

    def test_center_and_extents(self, flat_box):
        """Test array views of center and extents."""
        assert np.allclose(flat_box.center, [0.0, 0.0, 0.0])
        assert np.allclose(flat_box.extents, [0.5, 0.25, 0.1])

    def test_volume(self, flat_box):
        """Test volume is L * W * H."""
        assert np.isclose(flat_box.volume, 0.5 * 0.25 * 0.1)

    def test_immutable(self, flat_box):
        """Test parameters cannot be changed after creation."""
        with pytest.raises(AttributeError):
            flat_box.L = 2.0

    def test_dict_round_trip(self, flat_box):
        """Test to_dict / from_dict preserve all fields."""
        assert BoxParameters.from_dict(flat_box.to_dict()) == flat_box

    def test_corners_span_extents(self):
        """Test corners span exactly the box extents around the center."""
        box = BoxParameters(xc=1.0, yc=2.0, zc=3.0, L=4.0, W=2.0, H=1.0, sigma=0.1)
        corners = box.corners

        assert corners.shape == (8, 3)
        assert np.allclose(corners.min(axis=0), [-1.0, 1.0, 2.5])
        assert np.allclose(corners.max(axis=0), [3.0, 3.0, 3.5])


class TestBoxHelpers:
    """Tests for corner, edge and point cloud helpers."""

    def test_edges_grouped_by_axis(self):
        """Test each edge family is parallel to a single axis."""
        corners = compute_corners(np.zeros(3), np.array([1.0, 2.0, 3.0]))
        edges = compute_box_edges()

        assert len(edges) == 12
        for axis in range(3):
            for start, end in edges[4 * axis:4 * axis + 4]:
                direction = corners[end] - corners[start]
                # Positive along its own axis, zero elsewhere
                assert direction[axis] > 0
                assert np.allclose(np.delete(direction, axis), 0.0)

    def test_as_point_cloud_rejects_empty(self):
        """Test empty clouds raise unless explicitly allowed."""
        with pytest.raises(EmptyObservationError):
            as_point_cloud([])

        assert as_point_cloud([], allow_empty=True).shape == (0, 3)

    def test_as_point_cloud_rejects_bad_shape(self):
        """Test clouds without three columns are rejected."""
        with pytest.raises(ValueError):
            as_point_cloud(np.zeros((4, 2)))

    def test_points_in_box_mask(self):
        """Test inside / outside classification with margin."""
        points = np.array([
            [0.0, 0.0, 0.0],
            [0.5, 0.5, 0.5],   # On the boundary
            [0.6, 0.0, 0.0],   # Just outside
        ])
        mask = points_in_box_mask(points, np.zeros(3), np.ones(3))
        assert mask.tolist() == [True, True, False]

        mask = points_in_box_mask(points, np.zeros(3), np.ones(3), margin=0.2)
        assert mask.all()


# =============================================================================
# Wireframe Mapping
# =============================================================================

class TestMapBoxToPoints:
    """Tests for map_box_to_points."""

    @pytest.mark.parametrize("points_per_edge", [1, 2, 10, 37])
    def test_point_count(self, points_per_edge):
        """Test the wireframe has 12p + 1 points."""
        cloud = map_box_to_points(1.0, 2.0, 3.0, [0.3, -0.2, 5.0], points_per_edge)

        assert cloud.shape == (12 * points_per_edge + 1, 3)
        assert num_wireframe_points(points_per_edge) == len(cloud)

    def test_first_point_is_origin(self):
        """Test the sentinel origin comes first regardless of the box."""
        cloud = map_box_to_points(1.0, 1.0, 1.0, [10.0, 20.0, 30.0], 5)
        assert np.array_equal(cloud[0], [0.0, 0.0, 0.0])

    def test_zero_points_per_edge(self):
        """Test p = 0 returns the sentinel only."""
        cloud = map_box_to_points(1.0, 1.0, 1.0, [1.0, 1.0, 1.0], 0)

        assert cloud.shape == (1, 3)
        assert np.array_equal(cloud[0], [0.0, 0.0, 0.0])

    def test_reference_layout(self, flat_box):
        """Test point 1 sits 1/1000 along the first X edge."""
        cloud = box_to_points(flat_box, 1000)

        assert len(cloud) == 12001
        expected = np.array([-0.25, -0.125, -0.05]) + np.array([0.5, 0.0, 0.0]) / 1000
        assert np.allclose(cloud[1], expected)

    def test_points_lie_on_edges(self, flat_box):
        """Test every non-sentinel point has two coordinates on box faces."""
        cloud = box_to_points(flat_box, 20)[1:]
        half = flat_box.extents / 2

        on_face = np.isclose(np.abs(cloud - flat_box.center), half)
        assert np.all(on_face.sum(axis=1) >= 2)

    def test_edge_start_corner_excluded(self, flat_box):
        """Test offset 0 is never emitted for the first edge."""
        cloud = box_to_points(flat_box, 4)
        first_edge = cloud[1:5]

        assert not np.any(np.all(np.isclose(first_edge, [-0.25, -0.125, -0.05]), axis=1))
        assert np.allclose(first_edge[-1], [0.25, -0.125, -0.05])

    def test_deterministic(self):
        """Test repeated calls give identical output."""
        a = map_box_to_points(0.3, 0.4, 0.5, [1.0, 2.0, 3.0], 7)
        b = map_box_to_points(0.3, 0.4, 0.5, [1.0, 2.0, 3.0], 7)
        assert np.array_equal(a, b)

    @pytest.mark.parametrize("extents", [(0.0, 1.0, 1.0), (1.0, -0.5, 1.0), (1.0, 1.0, np.nan)])
    def test_non_positive_extent(self, extents):
        """Test zero, negative or NaN extents are rejected."""
        with pytest.raises(NonPositiveExtentError):
            map_box_to_points(*extents, [0.0, 0.0, 0.0], 3)

    def test_negative_points_per_edge(self):
        """Test negative resolution is rejected."""
        with pytest.raises(ValueError):
            map_box_to_points(1.0, 1.0, 1.0, [0.0, 0.0, 0.0], -1)
