"""
Image preparation shared by all contour strategies
"""

import cv2
import numpy as np
from typing import Optional

from common.errors import InvalidImageError


class PreparedImage:
    """
    Grayscale, blurred and color views of one input frame.

    Built once per detection pass and read by every strategy; none of the
    arrays alias the caller's image.
    """

    def __init__(self, color: np.ndarray, gray: np.ndarray, blurred: np.ndarray, boosted: Optional[np.ndarray] = None):
        self.color = color
        self.gray = gray
        self.blurred = blurred
        self.boosted = boosted
        self._gradient = None

    @property
    def height(self) -> int:
        return self.gray.shape[0]

    @property
    def width(self) -> int:
        return self.gray.shape[1]

    @property
    def shape(self):
        return self.gray.shape

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def segmentation_source(self) -> np.ndarray:
        """Color image used for luminance/saturation segmentation."""
        return self.boosted if self.boosted is not None else self.color

    @property
    def gradient(self) -> np.ndarray:
        """Sobel gradient magnitude of the blurred image (computed on first use)."""
        if self._gradient is None:
            grad_x = cv2.Sobel(self.blurred, cv2.CV_32F, 1, 0, ksize=3)
            grad_y = cv2.Sobel(self.blurred, cv2.CV_32F, 0, 1, ksize=3)
            self._gradient = cv2.addWeighted(np.abs(grad_x), 0.5, np.abs(grad_y), 0.5, 0)
        return self._gradient


def validate_image(image) -> None:
    """Raise InvalidImageError unless `image` is a non-empty 8-bit raster."""
    if image is None:
        raise InvalidImageError("Image is None")
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Expected numpy array, got {type(image).__name__}")
    if image.size == 0 or image.ndim not in (2, 3) or image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidImageError(f"Empty or malformed image with shape {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise InvalidImageError(f"Unsupported channel count: {image.shape[2]}")
    if image.dtype != np.uint8:
        raise InvalidImageError(f"Expected 8-bit image, got {image.dtype}")


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Return a new 3-channel BGR copy of a gray, BGR or BGRA image."""
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 1:
        return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image.copy()


def boost_contrast(color: np.ndarray, clip_limit: float = 2.0, tile_size: int = 8) -> np.ndarray:
    """CLAHE on the lightness channel, keeping hue and saturation."""
    lab = cv2.cvtColor(color, cv2.COLOR_BGR2LAB)
    lightness, a_channel, b_channel = cv2.split(lab)
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=(tile_size, tile_size))
    lab = cv2.merge((clahe.apply(lightness), a_channel, b_channel))
    return cv2.cvtColor(lab, cv2.COLOR_LAB2BGR)


def prepare_image(image: np.ndarray, contrast_boost: bool = False, blur_kernel: int = 5) -> PreparedImage:
    """
    Convert an input frame to the views used by the contour strategies.

    Args:
        image: Gray, BGR or BGRA uint8 image
        contrast_boost: Also build a CLAHE boosted color copy
        blur_kernel: Gaussian kernel size (odd)

    Returns:
        PreparedImage

    Raises:
        InvalidImageError: for empty or unsupported input
    """
    validate_image(image)

    color = to_bgr(image)
    gray = cv2.cvtColor(color, cv2.COLOR_BGR2GRAY)
    blurred = cv2.GaussianBlur(gray, (blur_kernel, blur_kernel), 0)
    boosted = boost_contrast(color) if contrast_boost else None

    return PreparedImage(color, gray, blurred, boosted)
