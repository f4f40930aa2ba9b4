import cv2
import numpy as np
from enum import Enum

from common.errors import InvalidImageError


class EnhanceMode(Enum):
    """Post-rectification contrast pass"""
    SHARPEN = "sharpen"
    UNSHARP = "unsharp"
    BINARIZE = "binarize"


SHARPEN_KERNEL = np.array([
    [0, -1, 0],
    [-1, 5, -1],
    [0, -1, 0]
], dtype=np.float32)


def to_gray(image: np.ndarray) -> np.ndarray:
    if image is None or image.size == 0:
        raise InvalidImageError("Cannot enhance an empty image")
    if image.ndim == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    if image.shape[2] == 1:
        return image[:, :, 0]
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def enhance(image: np.ndarray, mode: EnhanceMode = EnhanceMode.SHARPEN) -> np.ndarray:
    """
    Make a rectified page easier to read.

    SHARPEN blends the grayscale page 50/50 with a kernel-sharpened copy,
    UNSHARP subtracts a blurred copy (unsharp mask), BINARIZE applies a local
    Gaussian threshold for a black-and-white scan.

    Args:
        image: Rectified page (gray, BGR or BGRA)
        mode: Enhancement to apply

    Returns:
        New grayscale image of the same size

    Raises:
        InvalidImageError: for empty input
    """
    gray = to_gray(image)
    mode = EnhanceMode(mode)

    if mode == EnhanceMode.BINARIZE:
        return cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2)

    if mode == EnhanceMode.UNSHARP:
        blurred = cv2.GaussianBlur(gray, (0, 0), 3)
        return cv2.addWeighted(gray, 1.5, blurred, -0.5, 0)

    sharpened = cv2.filter2D(gray, -1, SHARPEN_KERNEL)
    return cv2.addWeighted(gray, 0.5, sharpened, 0.5, 0)
