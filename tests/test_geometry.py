"""
Tests for corner ordering and polygon helpers
"""

import itertools

import numpy as np
import pytest

from common.geometry import (
    diagonal_lengths,
    interior_angles,
    is_convex,
    min_corner_distance,
    order_corners,
    polygon_area,
    side_lengths,
)


def random_quads(count=25, seed=7):
    """Perturbed page-like quadrilaterals, deterministic."""
    rng = np.random.RandomState(seed)
    base = np.array([[100, 100], [500, 120], [520, 700], [90, 680]], dtype=np.float32)
    return [base + rng.uniform(-40, 40, size=(4, 2)).astype(np.float32) for _ in range(count)]


class TestOrderCorners:
    """Tests for order_corners"""

    def test_shuffled_rectangle(self):
        pts = np.array([
            [100, 200],  # bottom-left
            [100, 100],  # top-left
            [200, 100],  # top-right
            [200, 200]   # bottom-right
        ], dtype=np.float32)

        ordered = order_corners(pts)

        assert np.array_equal(ordered[0], [100, 100])
        assert np.array_equal(ordered[1], [200, 100])
        assert np.array_equal(ordered[2], [200, 200])
        assert np.array_equal(ordered[3], [100, 200])

    def test_returns_float32_copy(self):
        pts = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=np.int32)
        ordered = order_corners(pts)
        assert ordered.dtype == np.float32
        assert ordered.shape == (4, 2)

    def test_accepts_contour_shape(self):
        contour = np.array([[[10, 10]], [[10, 90]], [[90, 90]], [[90, 10]]], dtype=np.int32)
        ordered = order_corners(contour)
        assert np.array_equal(ordered, [[10, 10], [90, 10], [90, 90], [10, 90]])

    def test_idempotent(self):
        for quad in random_quads():
            once = order_corners(quad)
            twice = order_corners(once)
            assert np.array_equal(once, twice)

    def test_invariant_to_input_order(self):
        for quad in random_quads(count=5):
            expected = order_corners(quad)
            for permutation in itertools.permutations(range(4)):
                assert np.array_equal(order_corners(quad[list(permutation)]), expected)

    def test_invariant_to_rotation_of_start_vertex(self):
        quad = np.array([[120, 80], [480, 130], [510, 690], [70, 650]], dtype=np.float32)
        expected = order_corners(quad)
        for shift in range(4):
            assert np.array_equal(order_corners(np.roll(quad, shift, axis=0)), expected)

    def test_perspective_quad(self):
        quad = np.array([[880, 1300], [200, 150], [130, 1380], [820, 220]], dtype=np.float32)
        ordered = order_corners(quad)
        assert np.array_equal(ordered, [[200, 150], [820, 220], [880, 1300], [130, 1380]])

    def test_diamond_has_four_distinct_corners(self):
        diamond = np.array([[50, 0], [100, 50], [50, 100], [0, 50]], dtype=np.float32)
        ordered = order_corners(diamond)

        assert len({tuple(p) for p in ordered.tolist()}) == 4
        assert is_convex(ordered)
        for permutation in itertools.permutations(range(4)):
            assert np.array_equal(order_corners(diamond[list(permutation)]), ordered)

    def test_wrong_point_count(self):
        with pytest.raises(ValueError):
            order_corners(np.zeros((3, 2), dtype=np.float32))

    def test_non_finite(self):
        pts = np.array([[0, 0], [10, 0], [np.nan, 10], [0, 10]], dtype=np.float32)
        with pytest.raises(ValueError):
            order_corners(pts)


class TestPolygonHelpers:
    """Tests for area, lengths and angles"""

    @pytest.fixture
    def rectangle(self):
        return np.array([[0, 0], [40, 0], [40, 30], [0, 30]], dtype=np.float32)

    def test_polygon_area(self, rectangle):
        assert polygon_area(rectangle) == pytest.approx(1200.0)
        assert polygon_area(rectangle[::-1]) == pytest.approx(1200.0)

    def test_side_lengths(self, rectangle):
        assert side_lengths(rectangle) == pytest.approx([40.0, 30.0, 40.0, 30.0])

    def test_diagonal_lengths(self, rectangle):
        assert diagonal_lengths(rectangle) == pytest.approx((50.0, 50.0))

    def test_interior_angles_of_rectangle(self, rectangle):
        assert interior_angles(rectangle) == pytest.approx([90.0] * 4)

    def test_interior_angles_sum(self):
        quad = np.array([[0, 0], [100, 10], [90, 80], [5, 60]], dtype=np.float32)
        assert sum(interior_angles(quad)) == pytest.approx(360.0, abs=1e-3)

    def test_min_corner_distance(self, rectangle):
        assert min_corner_distance(rectangle) == pytest.approx(30.0)

    def test_is_convex(self, rectangle):
        assert is_convex(rectangle)

    def test_bow_tie_is_not_convex(self):
        bow_tie = np.array([[0, 0], [10, 10], [10, 0], [0, 10]], dtype=np.float32)
        assert not is_convex(bow_tie)

    def test_collinear_is_not_convex(self):
        line = np.array([[0, 0], [10, 0], [20, 0], [30, 0]], dtype=np.float32)
        assert not is_convex(line)
