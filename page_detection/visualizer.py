"""
Debug overlay for detected page corners
"""

import cv2
import numpy as np
from typing import Tuple

CORNER_LABELS = ("TL", "TR", "BR", "BL")


class PageVisualizer:
    """
    Draws a detected page onto a copy of the image.

    A frame along the page border, a transparent fill and labelled corner
    markers; used by the command line tool to write preview images.
    """

    def __init__(
        self,
        border_color: Tuple[int, int, int] = (255, 100, 0),  # Blue in BGR
        border_thickness: int = 3,
        overlay_color: Tuple[int, int, int] = (255, 200, 100),  # Light blue in BGR
        overlay_alpha: float = 0.3
    ):
        """
        Initialize the visualizer.

        Args:
            border_color: Frame color in BGR format
            border_thickness: Frame thickness in pixels
            overlay_color: Transparent overlay color in BGR format
            overlay_alpha: Overlay transparency (0.0 = transparent, 1.0 = opaque)
        """
        self.border_color = border_color
        self.border_thickness = border_thickness
        self.overlay_color = overlay_color
        self.overlay_alpha = overlay_alpha

    def visualize(
        self,
        image: np.ndarray,
        corners: np.ndarray,
        draw_border: bool = True,
        draw_overlay: bool = True,
        draw_corners: bool = True
    ) -> np.ndarray:
        """
        Visualize a detected page on the image.

        Args:
            image: Input image (gray or BGR)
            corners: Ordered corners [[x1,y1], [x2,y2], [x3,y3], [x4,y4]]
            draw_border: Whether to draw the frame
            draw_overlay: Whether to draw the transparent fill
            draw_corners: Whether to mark and label the corners

        Returns:
            New BGR image with the visualization; the input is returned
            unchanged when image or corners is None
        """
        if image is None or corners is None:
            return image

        result = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR) if image.ndim == 2 else image.copy()
        corners_int = np.round(np.asarray(corners, dtype=np.float32)).astype(np.int32)

        if draw_overlay:
            overlay = result.copy()
            cv2.fillPoly(overlay, [corners_int], self.overlay_color)
            result = cv2.addWeighted(
                overlay,
                self.overlay_alpha,
                result,
                1 - self.overlay_alpha,
                0
            )

        if draw_border:
            cv2.polylines(result, [corners_int], True, self.border_color, self.border_thickness, cv2.LINE_AA)

        if draw_corners:
            radius = max(5, min(result.shape[:2]) // 100)
            for label, (x, y) in zip(CORNER_LABELS, corners_int):
                cv2.circle(result, (int(x), int(y)), radius, self.border_color, -1)
                self._put_text(result, label, (int(x) + radius + 2, int(y) - radius - 2))

        return result

    def create_side_by_side(
        self,
        original: np.ndarray,
        processed: np.ndarray
    ) -> np.ndarray:
        """
        Create an image with the original and a processed image side by side.

        Args:
            original: Original image
            processed: Visualized or rectified image

        Returns:
            Combined image
        """
        if original is None or processed is None:
            return original if original is not None else processed

        if original.ndim == 2:
            original = cv2.cvtColor(original, cv2.COLOR_GRAY2BGR)
        if processed.ndim == 2:
            processed = cv2.cvtColor(processed, cv2.COLOR_GRAY2BGR)

        # Both images need the same height
        if original.shape[0] != processed.shape[0]:
            height = original.shape[0]
            width = max(1, int(processed.shape[1] * height / processed.shape[0]))
            processed = cv2.resize(processed, (width, height))

        return np.hstack([original, processed])

    @staticmethod
    def _put_text(image: np.ndarray, text: str, origin: Tuple[int, int]) -> None:
        # White outline, black text
        cv2.putText(image, text, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2, cv2.LINE_AA)
        cv2.putText(image, text, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 1, cv2.LINE_AA)
