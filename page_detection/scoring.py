"""
Quality score for quadrilateral page candidates.

Every criterion yields a sub-score in [0, 1] (1 = looks most like a page) and
the composite is their weighted mean, so it stays in [0, 1] as well. Weights
and bands are plain parameters: they were tuned by eye on sample photos and
are expected to be adjusted.
"""

import math
import numpy as np
from typing import Dict, Optional, Tuple

from common.geometry import (
    as_points,
    diagonal_lengths,
    interior_angles,
    is_convex,
    min_corner_distance,
    order_corners,
    polygon_area,
    side_lengths,
)

DEFAULT_WEIGHTS = {
    'edge_consistency': 0.20,
    'diagonal_consistency': 0.15,
    'aspect': 0.10,
    'centering': 0.15,
    'area': 0.20,
    'angle': 0.20,
    'sharpness': 0.15,
}

ASPECT_BAND = (1.0, 2.0)
AREA_BAND = (0.10, 0.95)

# Mean gradient magnitude around a corner that counts as a fully sharp edge
SHARPNESS_SCALE = 50.0
SHARPNESS_WINDOW = 7

# Corners closer than this fraction of the larger image side are degenerate
MIN_CORNER_SEPARATION = 0.03


def _ratio(a: float, b: float) -> float:
    longer = max(a, b)
    if longer <= 0:
        return 0.0
    return min(a, b) / longer


def edge_consistency_score(corners) -> float:
    top, right, bottom, left = side_lengths(corners)
    return (_ratio(top, bottom) + _ratio(left, right)) / 2.0


def diagonal_consistency_score(corners) -> float:
    return _ratio(*diagonal_lengths(corners))


def aspect_ratio(corners) -> float:
    """Long side over short side, using the mean of opposite sides."""
    top, right, bottom, left = side_lengths(corners)
    width = (top + bottom) / 2.0
    height = (left + right) / 2.0
    shorter = min(width, height)
    if shorter <= 0:
        return float('inf')
    return max(width, height) / shorter


def aspect_score(corners, band: Tuple[float, float] = ASPECT_BAND) -> float:
    ratio = aspect_ratio(corners)
    if math.isinf(ratio):
        return 0.0
    if ratio <= band[1]:
        return 1.0
    return math.exp(-(ratio - band[1]))


def centering_score(corners, image_shape) -> float:
    h, w = image_shape[:2]
    centroid = as_points(corners).mean(axis=0)
    offset = math.hypot(float(centroid[0]) - w / 2.0, float(centroid[1]) - h / 2.0)
    diagonal = math.hypot(w, h)
    # The farthest a centroid inside the image can be is half the diagonal
    return max(0.0, 1.0 - 2.0 * offset / diagonal)


def area_score(corners, image_shape, band: Tuple[float, float] = AREA_BAND) -> float:
    h, w = image_shape[:2]
    relative = polygon_area(corners) / float(w * h)
    low, high = band
    if low <= relative <= high:
        return 1.0
    if relative < low:
        return max(0.0, relative / low)
    return max(0.0, 1.0 - (relative - high) / (1.0 - high + 1e-6))


def angle_score(corners) -> float:
    deviation = sum(abs(angle - 90.0) for angle in interior_angles(corners)) / 4.0
    return max(0.0, 1.0 - deviation / 45.0)


def sharpness_score(corners, gradient: np.ndarray, window: int = SHARPNESS_WINDOW) -> Optional[float]:
    """
    Mean gradient magnitude in a small window around each corner.

    Corners whose window falls outside the image are skipped; None when no
    corner could be sampled.
    """
    h, w = gradient.shape[:2]
    half = window // 2
    energies = []

    for x, y in as_points(corners):
        cx, cy = int(round(float(x))), int(round(float(y)))
        if half <= cx < w - half and half <= cy < h - half:
            patch = gradient[cy - half:cy + half + 1, cx - half:cx + half + 1]
            energies.append(float(patch.mean()))

    if not energies:
        return None
    return min(float(np.mean(energies)) / SHARPNESS_SCALE, 1.0)


def score_quadrilateral(
    corners,
    image_shape,
    gradient: Optional[np.ndarray] = None,
    weights: Optional[Dict[str, float]] = None,
    aspect_band: Tuple[float, float] = ASPECT_BAND,
    area_band: Tuple[float, float] = AREA_BAND
) -> Optional[Dict]:
    """
    Score a 4-point candidate.

    Args:
        corners: 4 points in any order
        image_shape: Shape of the image the corners belong to
        gradient: Gradient magnitude map; enables the sharpness criterion
        weights: Criterion weights, defaults to DEFAULT_WEIGHTS
        aspect_band: Long:short side ratios that are not penalized
        area_band: Area fractions of the image that are not penalized

    Returns:
        Dict with ordered 'corners', composite 'score' and per-criterion
        'features', or None when the corners are degenerate or crossed.
    """
    ordered = order_corners(corners)

    max_dim = max(image_shape[0], image_shape[1])
    if min_corner_distance(ordered) < max_dim * MIN_CORNER_SEPARATION:
        return None
    if not is_convex(ordered):
        return None

    features = {
        'edge_consistency': edge_consistency_score(ordered),
        'diagonal_consistency': diagonal_consistency_score(ordered),
        'aspect': aspect_score(ordered, aspect_band),
        'centering': centering_score(ordered, image_shape),
        'area': area_score(ordered, image_shape, area_band),
        'angle': angle_score(ordered),
    }
    if gradient is not None:
        sharpness = sharpness_score(ordered, gradient)
        if sharpness is not None:
            features['sharpness'] = sharpness

    weights = weights or DEFAULT_WEIGHTS
    total_weight = sum(weights.get(name, 0.0) for name in features)
    if total_weight <= 0:
        return None
    score = sum(value * weights.get(name, 0.0) for name, value in features.items()) / total_weight

    return {
        'corners': ordered,
        'score': float(score),
        'features': features,
    }
