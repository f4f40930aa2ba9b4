"""
Reduce traced contours to 4-vertex page candidates
"""

import cv2
import numpy as np
from typing import Dict, List

from common.geometry import as_points, is_convex, order_corners, polygon_area

# Wider tolerances tried on the largest contour before giving up on a polygon
FALLBACK_EPSILONS = (0.02, 0.03, 0.04, 0.05)


def is_convex_quadrilateral(points) -> bool:
    pts = as_points(points)
    return len(pts) == 4 and is_convex(pts)


def min_area_box(contour: np.ndarray) -> np.ndarray:
    """Corners of the minimum-area rotated rectangle around a contour."""
    rect = cv2.minAreaRect(as_points(contour))
    return cv2.boxPoints(rect).astype(np.float32)


def _quad(corners: np.ndarray, source: str) -> Dict:
    ordered = order_corners(corners)
    return {
        'corners': ordered,
        'area': polygon_area(ordered),
        'source': source,
    }


def approximate_quadrilaterals(
    contours: List[np.ndarray],
    epsilon_ratio: float = 0.02,
    lenient: bool = False
) -> List[Dict]:
    """
    Convert contours to quadrilateral candidates.

    Every contour is simplified with Ramer-Douglas-Peucker at a tolerance of
    `epsilon_ratio` of its perimeter. A result with 4 convex vertices is kept
    as is; in lenient mode a 5 or 6 vertex result is replaced by the contour's
    minimum-area rectangle.

    When no contour qualifies, the largest one is retried with wider
    tolerances and finally replaced by its minimum-area rectangle.

    Args:
        contours: Contours sorted by area, largest first
        epsilon_ratio: Simplification tolerance as a fraction of the perimeter
        lenient: Accept 5-6 vertex polygons

    Returns:
        List of dicts with 'corners' (ordered, float32), 'area' and 'source'
    """
    quads = []

    for contour in contours:
        peri = cv2.arcLength(contour, True)
        approx = cv2.approxPolyDP(contour, epsilon_ratio * peri, True)
        vertices = len(approx)

        if vertices == 4 and is_convex_quadrilateral(approx):
            quads.append(_quad(as_points(approx), 'polygon'))
        elif lenient and 5 <= vertices <= 6:
            quads.append(_quad(min_area_box(contour), 'min_area_rect'))

    if quads or not contours:
        return quads

    largest = contours[0]
    peri = cv2.arcLength(largest, True)
    for factor in FALLBACK_EPSILONS:
        approx = cv2.approxPolyDP(largest, factor * peri, True)
        if len(approx) == 4 and is_convex_quadrilateral(approx):
            return [_quad(as_points(approx), 'polygon')]

    box = min_area_box(largest)
    if not is_convex_quadrilateral(box):
        return []
    return [_quad(box, 'min_area_rect')]
