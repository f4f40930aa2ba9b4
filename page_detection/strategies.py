"""
Binarization strategies that turn a prepared image into closed contours.

Each strategy is independent of the others and keeps no state between calls,
so they can be run in any order or concurrently on the same PreparedImage.
"""

import cv2
import numpy as np
from typing import List, Optional, Tuple

from .preparer import PreparedImage


class ContourStrategy:
    """Base class: binarize a prepared image and trace its contours."""

    name = "base"

    def extract_contours(self, prepared: PreparedImage) -> List[np.ndarray]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EdgeStrategy(ContourStrategy):
    """
    Canny edges, dilated to bridge small gaps, then every contour (inner and
    outer) of the resulting edge map.
    """

    name = "edge"

    def __init__(self, low_threshold: int = 50, high_threshold: int = 200, dilate_kernel: int = 5):
        self.low_threshold = low_threshold
        self.high_threshold = high_threshold
        self.dilate_kernel = dilate_kernel

    def extract_contours(self, prepared: PreparedImage) -> List[np.ndarray]:
        edges = cv2.Canny(prepared.blurred, self.low_threshold, self.high_threshold)

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (self.dilate_kernel, self.dilate_kernel))
        dilated = cv2.dilate(edges, kernel)

        contours, _ = cv2.findContours(dilated, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)


class AdaptiveThresholdStrategy(ContourStrategy):
    """
    Local Gaussian threshold (tolerant of uneven lighting), closed with a
    rectangular kernel, outer contours only.
    """

    name = "adaptive"

    def __init__(self, block_size: int = 11, c: float = 2, close_kernel: int = 9):
        if block_size % 2 == 0 or block_size < 3:
            raise ValueError("block_size must be an odd number >= 3")
        self.block_size = block_size
        self.c = c
        self.close_kernel = close_kernel

    def extract_contours(self, prepared: PreparedImage) -> List[np.ndarray]:
        binary = cv2.adaptiveThreshold(
            prepared.blurred,
            255,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY_INV,
            self.block_size,
            self.c
        )

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (self.close_kernel, self.close_kernel))
        binary = cv2.morphologyEx(binary, cv2.MORPH_CLOSE, kernel)

        contours, _ = cv2.findContours(binary, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)


class SegmentationStrategy(ContourStrategy):
    """
    Mask of bright, low saturation pixels (white paper) in HSV space,
    cleaned with close + open, outer contours only.
    """

    name = "segmentation"

    def __init__(self, min_value: int = 200, max_saturation: int = 30, kernel_size: int = 11):
        self.min_value = min_value
        self.max_saturation = max_saturation
        self.kernel_size = kernel_size

    def extract_contours(self, prepared: PreparedImage) -> List[np.ndarray]:
        hsv = cv2.cvtColor(prepared.segmentation_source, cv2.COLOR_BGR2HSV)

        lower = np.array([0, 0, self.min_value], dtype=np.uint8)
        upper = np.array([180, self.max_saturation, 255], dtype=np.uint8)
        mask = cv2.inRange(hsv, lower, upper)

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (self.kernel_size, self.kernel_size))
        mask = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)
        mask = cv2.morphologyEx(mask, cv2.MORPH_OPEN, kernel)

        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)


def default_strategies(low_threshold: int = 50, high_threshold: int = 200) -> List[ContourStrategy]:
    """Edge, adaptive-threshold and segmentation strategies, in that order."""
    return [
        EdgeStrategy(low_threshold, high_threshold),
        AdaptiveThresholdStrategy(),
        SegmentationStrategy(),
    ]


# Contours reaching within this many pixels of all four borders trace the frame
FRAME_MARGIN = 2


def spans_frame(contour: np.ndarray, image_shape, margin: int = FRAME_MARGIN) -> bool:
    """True when the contour's bounding box touches every image border."""
    h, w = image_shape[:2]
    x, y, bw, bh = cv2.boundingRect(contour)
    return x <= margin and y <= margin and x + bw >= w - margin and y + bh >= h - margin


def filter_contours(
    contours: List[np.ndarray],
    image_area: float,
    min_area_ratio: float,
    max_area_ratio: float = 1.0,
    image_shape: Optional[Tuple[int, ...]] = None
) -> List[np.ndarray]:
    """
    Drop contours whose area is outside [min_area_ratio, max_area_ratio] of the
    image and sort the rest by area, largest first.

    With `image_shape`, contours outlining the image frame itself (a blank or
    overexposed frame) are dropped as well, whatever their area.
    """
    min_area = image_area * min_area_ratio
    max_area = image_area * max_area_ratio

    sized = []
    for contour in contours:
        area = cv2.contourArea(contour)
        if not min_area <= area <= max_area:
            continue
        if image_shape is not None and spans_frame(contour, image_shape):
            continue
        sized.append((area, contour))

    sized.sort(key=lambda item: item[0], reverse=True)
    return [contour for _, contour in sized]
