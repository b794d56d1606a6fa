"""Tests for the Chamfer distance scorer."""

import numpy as np
import pytest

from boxfit.errors import EmptyObservationError
from boxfit.geometry.chamfer import chamfer_distance, chamfer_terms, nearest_squared_distances
from boxfit.geometry.wireframe import map_box_to_points


@pytest.fixture
def random_clouds():
    """Two unrelated random clouds of different sizes."""
    rng = np.random.default_rng(3)
    return rng.normal(size=(40, 3)), rng.normal(loc=0.5, size=(25, 3))


class TestChamferDistance:
    """Tests for chamfer_distance."""

    def test_known_value(self):
        """Test a hand-computed distance."""
        a = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]])
        b = np.array([[0.0, 1.0, 0.0]])

        # A -> B: 1 + 2, B -> A: 1
        assert np.isclose(chamfer_distance(a, b), 4.0)
        assert np.allclose(chamfer_terms(a, b), (3.0, 1.0))

    def test_symmetric(self, random_clouds):
        """Test d(A, B) == d(B, A)."""
        a, b = random_clouds
        assert chamfer_distance(a, b) == chamfer_distance(b, a)

    def test_identity_is_zero(self, random_clouds):
        """Test d(A, A) == 0."""
        a, _ = random_clouds
        assert chamfer_distance(a, a) == 0.0

    def test_unit_cube_wireframe_self_distance(self):
        """Test the unit cube wireframe has zero distance to itself."""
        cube = map_box_to_points(1.0, 1.0, 1.0, [0.0, 0.0, 0.0], 10)
        assert chamfer_distance(cube, cube) == 0.0

    def test_non_negative(self, random_clouds):
        """Test the distance is never negative."""
        a, b = random_clouds
        assert chamfer_distance(a, b) >= 0.0

    def test_not_normalized(self):
        """Test duplicating points scales the distance instead of averaging."""
        a = np.array([[0.0, 0.0, 0.0]])
        b = np.array([[2.0, 0.0, 0.0]])

        single = chamfer_distance(a, b)
        doubled = chamfer_distance(np.vstack([a, a]), b)

        assert np.isclose(single, 8.0)
        assert np.isclose(doubled, 12.0)

    def test_increases_when_point_moves_away(self):
        """Test moving a point farther from its nearest neighbour raises the score."""
        a = np.array([[0.0, 0.0, 0.0]])
        b = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
        b_moved = np.array([[1.0, 0.0, 0.0], [0.0, 3.0, 0.0]])

        assert chamfer_distance(a, b_moved) > chamfer_distance(a, b)

    def test_brute_matches_kdtree(self, random_clouds):
        """Test both nearest-neighbour backends give the same minima."""
        a, b = random_clouds

        kdtree = nearest_squared_distances(a, b, method="kdtree")
        brute = nearest_squared_distances(a, b, method="brute")

        assert np.array_equal(kdtree, brute)
        assert chamfer_distance(a, b, method="kdtree") == chamfer_distance(a, b, method="brute")

    def test_kdtree_minima_exact_on_dense_clouds(self):
        """Test the default backend reproduces brute-force minima bit for bit."""
        rng = np.random.default_rng(11)
        queries = rng.uniform(size=(600, 3))
        reference = rng.uniform(size=(450, 3))

        kdtree = nearest_squared_distances(queries, reference, method="kdtree")
        brute = nearest_squared_distances(queries, reference, method="brute")

        assert np.array_equal(kdtree, brute)

    def test_unknown_method(self, random_clouds):
        """Test an unknown backend name is rejected."""
        a, b = random_clouds
        with pytest.raises(ValueError, match="Unknown Chamfer method"):
            chamfer_distance(a, b, method="octree")

    @pytest.mark.parametrize("empty_first", [True, False])
    def test_empty_input(self, empty_first):
        """Test an empty point set is an error."""
        cloud = np.ones((5, 3))
        empty = np.zeros((0, 3))

        with pytest.raises(EmptyObservationError):
            if empty_first:
                chamfer_distance(empty, cloud)
            else:
                chamfer_distance(cloud, empty)
