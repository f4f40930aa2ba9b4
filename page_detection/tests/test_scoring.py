"""
Tests for quadrilateral scoring
"""

import numpy as np
import pytest

from page_detection.preparer import prepare_image
from page_detection.scoring import (
    DEFAULT_WEIGHTS,
    angle_score,
    area_score,
    aspect_score,
    centering_score,
    score_quadrilateral,
    sharpness_score,
)

SHAPE = (1000, 1000)

# Centered square covering 40% of the frame
SQUARE = np.array([[184, 184], [816, 184], [816, 816], [184, 816]], dtype=np.float32)
# 5% wide strip along the left border
SLIVER = np.array([[0, 0], [50, 0], [50, 1000], [0, 1000]], dtype=np.float32)


class TestScoreQuadrilateral:
    def test_centered_square_beats_border_sliver(self):
        square = score_quadrilateral(SQUARE, SHAPE)
        sliver = score_quadrilateral(SLIVER, SHAPE)

        assert square['score'] > sliver['score']
        assert square['score'] == pytest.approx(1.0, abs=1e-3)

    def test_features_in_unit_range(self):
        for corners in (SQUARE, SLIVER):
            result = score_quadrilateral(corners, SHAPE)
            assert 0.0 <= result['score'] <= 1.0
            for value in result['features'].values():
                assert 0.0 <= value <= 1.0

    def test_returns_ordered_corners(self):
        result = score_quadrilateral(SQUARE[[3, 1, 0, 2]], SHAPE)
        assert np.array_equal(result['corners'], SQUARE)

    def test_sharpness_only_with_gradient(self):
        assert 'sharpness' not in score_quadrilateral(SQUARE, SHAPE)['features']

        gradient = np.zeros(SHAPE, dtype=np.float32)
        result = score_quadrilateral(SQUARE, SHAPE, gradient=gradient)
        assert result['features']['sharpness'] == 0.0
        assert result['score'] < 1.0

    def test_custom_weights(self):
        result = score_quadrilateral(SLIVER, SHAPE, weights={'area': 1.0})
        assert result['score'] == pytest.approx(result['features']['area'])

    def test_coincident_corners_rejected(self):
        corners = np.array([[100, 100], [101, 100], [500, 600], [100, 600]], dtype=np.float32)
        assert score_quadrilateral(corners, SHAPE) is None

    def test_default_weights_cover_all_criteria(self):
        result = score_quadrilateral(SQUARE, SHAPE, gradient=np.zeros(SHAPE, dtype=np.float32))
        assert set(result['features']) == set(DEFAULT_WEIGHTS)


class TestCriteria:
    def test_aspect_within_band(self):
        a4 = np.array([[0, 0], [210, 0], [210, 297], [0, 297]], dtype=np.float32)
        assert aspect_score(a4) == 1.0

    def test_aspect_decays_outside_band(self):
        wide = np.array([[0, 0], [250, 0], [250, 100], [0, 100]], dtype=np.float32)
        wider = np.array([[0, 0], [400, 0], [400, 100], [0, 100]], dtype=np.float32)
        assert 0.0 < aspect_score(wider) < aspect_score(wide) < 1.0

    def test_centering(self):
        assert centering_score(SQUARE, SHAPE) == pytest.approx(1.0)
        assert centering_score(SLIVER, SHAPE) < 0.5

    def test_area_band(self):
        assert area_score(SQUARE, SHAPE) == 1.0
        assert area_score(SLIVER, SHAPE) == pytest.approx(0.5)

        everything = np.array([[0, 0], [1000, 0], [1000, 1000], [0, 1000]], dtype=np.float32)
        assert area_score(everything, SHAPE) < 0.01

    def test_angle(self):
        assert angle_score(SQUARE) == pytest.approx(1.0)
        skewed = np.array([[0, 0], [100, 0], [150, 100], [50, 100]], dtype=np.float32)
        assert angle_score(skewed) < angle_score(SQUARE)

    def test_sharpness_at_real_edges(self, small_scene):
        image, corners = small_scene
        gradient = prepare_image(image).gradient

        assert sharpness_score(corners, gradient) > 0.0
        inside = np.array([[150, 250], [250, 250], [250, 350], [150, 350]], dtype=np.float32)
        assert sharpness_score(inside, gradient) == 0.0

    def test_sharpness_outside_image(self):
        gradient = np.ones((100, 100), dtype=np.float32)
        outside = np.array([[-50, -50], [500, -50], [500, 500], [-50, 500]], dtype=np.float32)
        assert sharpness_score(outside, gradient) is None
