"""
Perspective rectification of a detected page
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from common import config
from common.errors import DegenerateQuadrilateralError
from common.geometry import as_points, distance, is_convex, min_corner_distance, order_corners, polygon_area
from page_detection.preparer import validate_image
from .enhancer import EnhanceMode, enhance

logger = logging.getLogger(__name__)

# Corners closer than this (px) are treated as coincident
MIN_SIDE = 1.0


class RectifyOptions:
    """
    Parameters of rectify().

    Args:
        max_output_dimension: Cap for the longer output side in pixels, None
            for no cap (environment default when not given)
        enhance: Run the document enhancer on the warped page
        enhance_mode: Which enhancement to run
        interpolation: OpenCV interpolation flag for the warp
    """

    _UNSET = object()

    def __init__(
        self,
        max_output_dimension=_UNSET,
        enhance: bool = False,
        enhance_mode: EnhanceMode = EnhanceMode.SHARPEN,
        interpolation: int = cv2.INTER_LINEAR
    ):
        if max_output_dimension is RectifyOptions._UNSET:
            max_output_dimension = config.max_output_dimension()
        if max_output_dimension is not None and max_output_dimension <= 0:
            raise ValueError("max_output_dimension must be positive or None")
        self.max_output_dimension = max_output_dimension
        self.enhance = enhance
        self.enhance_mode = EnhanceMode(enhance_mode)
        self.interpolation = interpolation

    @classmethod
    def from_env(cls, **overrides) -> "RectifyOptions":
        return cls(**overrides)


def validate_corners(corners) -> np.ndarray:
    """
    Order corners and check they describe a convex, non-degenerate page.

    Returns:
        Ordered corners (float32, shape (4, 2))

    Raises:
        DegenerateQuadrilateralError: if the corners cannot be rectified
    """
    try:
        ordered = order_corners(corners)
    except ValueError as e:
        raise DegenerateQuadrilateralError(str(e)) from e

    if min_corner_distance(ordered) < MIN_SIDE:
        raise DegenerateQuadrilateralError("Two or more corners coincide")
    if polygon_area(ordered) < MIN_SIDE:
        raise DegenerateQuadrilateralError("Corners are collinear")
    if not is_convex(ordered):
        raise DegenerateQuadrilateralError("Corners do not form a convex quadrilateral")
    return ordered


def output_size(corners, max_output_dimension: Optional[int] = None) -> Tuple[float, float]:
    """
    Size of the rectified page.

    Width is the longer of the top and bottom sides, height the longer of the
    left and right sides. With a cap, both are scaled by the same factor so
    the aspect ratio is kept.

    Args:
        corners: Ordered corners (top-left, top-right, bottom-right, bottom-left)
        max_output_dimension: Optional cap for the longer side

    Returns:
        (width, height) in pixels, as floats
    """
    tl, tr, br, bl = as_points(corners)

    width = max(distance(tl, tr), distance(bl, br))
    height = max(distance(tl, bl), distance(tr, br))

    if width < MIN_SIDE or height < MIN_SIDE:
        raise DegenerateQuadrilateralError(f"Output size {width:.1f}x{height:.1f} is degenerate")

    if max_output_dimension is not None and max(width, height) > max_output_dimension:
        scale = max_output_dimension / max(width, height)
        width *= scale
        height *= scale

    return width, height


def compute_homography(corners, width: float, height: float) -> np.ndarray:
    """3x3 transform mapping the ordered corners onto (0,0)-(W,0)-(W,H)-(0,H)."""
    dst = np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height]
    ], dtype=np.float32)
    return cv2.getPerspectiveTransform(as_points(corners), dst)


def rectify(image: np.ndarray, corners, options: Optional[RectifyOptions] = None) -> np.ndarray:
    """
    Warp the page outlined by `corners` into a flat, axis-aligned image.

    Args:
        image: Source image (gray, BGR or BGRA uint8, not modified)
        corners: 4 page corners in image pixels
        options: Output size cap and enhancement

    Returns:
        New image of the rectified page (grayscale when enhanced)

    Raises:
        InvalidImageError: for empty or unsupported images
        DegenerateQuadrilateralError: for corners that do not outline a page
    """
    options = options or RectifyOptions()
    validate_image(image)

    ordered = validate_corners(corners)
    width, height = output_size(ordered, options.max_output_dimension)
    out_w = max(1, int(round(width)))
    out_h = max(1, int(round(height)))

    matrix = compute_homography(ordered, width, height)
    if not np.all(np.isfinite(matrix)):
        raise DegenerateQuadrilateralError("Perspective transform is not finite")

    warped = cv2.warpPerspective(image, matrix, (out_w, out_h), flags=options.interpolation)
    logger.debug("Rectified page to %dx%d", out_w, out_h)

    if options.enhance:
        return enhance(warped, options.enhance_mode)
    return warped
