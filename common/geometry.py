"""
Plane geometry helpers for 4-point corner sets.

All functions take point arrays of shape (N, 2) in image-pixel coordinates.
"""

import math
import numpy as np
from typing import List, Tuple


def as_points(points) -> np.ndarray:
    """Convert contour-like input ((N,1,2), (N,2), lists) to a float32 (N, 2) array."""
    return np.asarray(points, dtype=np.float32).reshape(-1, 2)


def distance(p1, p2) -> float:
    return float(math.hypot(float(p2[0]) - float(p1[0]), float(p2[1]) - float(p1[1])))


def order_corners(points) -> np.ndarray:
    """
    Order 4 points as top-left, top-right, bottom-right, bottom-left.

    Top-left has the smallest x+y, bottom-right the largest x+y, top-right the
    largest x-y and bottom-left the smallest x-y. Ties are broken by y so the
    result only depends on the set of points, not on their input order.

    Args:
        points: 4 points in any order

    Returns:
        float32 array of shape (4, 2)

    Raises:
        ValueError: if there are not exactly 4 finite points
    """
    pts = as_points(points)
    if pts.shape != (4, 2):
        raise ValueError(f"Expected 4 points, got {len(pts)}")
    if not np.all(np.isfinite(pts)):
        raise ValueError("Corner coordinates must be finite")

    rows = [(float(x), float(y)) for x, y in pts]
    indices = range(4)

    tl = min(indices, key=lambda i: (rows[i][0] + rows[i][1], rows[i][1]))
    br = max(indices, key=lambda i: (rows[i][0] + rows[i][1], rows[i][1]))
    tr = max(indices, key=lambda i: (rows[i][0] - rows[i][1], -rows[i][1]))
    bl = min(indices, key=lambda i: (rows[i][0] - rows[i][1], -rows[i][1]))

    if len({tl, tr, br, bl}) == 4:
        return pts[[tl, tr, br, bl]].copy()

    # Diagonal-symmetric shapes (e.g. a square rotated by 45 degrees) make the
    # sum/difference rule pick one point twice; walk clockwise instead.
    return _order_by_angle(pts, rows)


def _order_by_angle(pts: np.ndarray, rows: List[Tuple[float, float]]) -> np.ndarray:
    cx = sum(r[0] for r in rows) / 4.0
    cy = sum(r[1] for r in rows) / 4.0
    clockwise = sorted(range(4), key=lambda i: (math.atan2(rows[i][1] - cy, rows[i][0] - cx), rows[i][1], rows[i][0]))
    start = min(range(4), key=lambda k: (rows[clockwise[k]][0] + rows[clockwise[k]][1], rows[clockwise[k]][1]))
    return pts[clockwise[start:] + clockwise[:start]].copy()


def polygon_area(points) -> float:
    """Absolute area of a simple polygon (shoelace formula)."""
    pts = as_points(points).astype(np.float64)
    x, y = pts[:, 0], pts[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)


def side_lengths(corners) -> List[float]:
    """Lengths of top, right, bottom and left sides of an ordered corner set."""
    pts = as_points(corners)
    return [distance(pts[i], pts[(i + 1) % 4]) for i in range(4)]


def diagonal_lengths(corners) -> Tuple[float, float]:
    pts = as_points(corners)
    return distance(pts[0], pts[2]), distance(pts[1], pts[3])


def interior_angles(corners) -> List[float]:
    """Interior angles in degrees at each vertex of an ordered corner set."""
    pts = as_points(corners).astype(np.float64)
    angles = []
    for i in range(4):
        prev_pt = pts[i - 1]
        vertex = pts[i]
        next_pt = pts[(i + 1) % 4]

        v1 = prev_pt - vertex
        v2 = next_pt - vertex
        norm = np.linalg.norm(v1) * np.linalg.norm(v2)
        if norm == 0:
            angles.append(0.0)
            continue
        cos_angle = np.clip(np.dot(v1, v2) / norm, -1.0, 1.0)
        angles.append(float(np.degrees(np.arccos(cos_angle))))
    return angles


def min_corner_distance(corners) -> float:
    pts = as_points(corners)
    return min(
        distance(pts[i], pts[j])
        for i in range(len(pts))
        for j in range(i + 1, len(pts))
    )


def is_convex(corners) -> bool:
    """True when the polygon turns the same way at every vertex (no crossings)."""
    pts = as_points(corners).astype(np.float64)
    n = len(pts)
    signs = set()
    for i in range(n):
        a, b, c = pts[i], pts[(i + 1) % n], pts[(i + 2) % n]
        cross = (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])
        if abs(cross) < 1e-9:
            return False
        signs.add(cross > 0)
    return len(signs) == 1
