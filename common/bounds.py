import numpy as np


class Bounds:
    def __init__(self, left, top, width, height):
        self.left = left
        self.top = top
        self.width = width
        self.height = height

    def __str__(self) -> str:
        return f"Bounds({self.left}, {self.top}, {self.width}, {self.height})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bounds):
            return NotImplemented
        return (self.left, self.top, self.width, self.height) == (other.left, other.top, other.width, other.height)

    @classmethod
    def of_image(cls, image_shape) -> "Bounds":
        """Bounds covering a whole image of the given numpy shape."""
        return cls(0, 0, image_shape[1], image_shape[0])

    @classmethod
    def of_points(cls, points) -> "Bounds":
        """Axis-aligned bounding box of a set of points."""
        pts = np.asarray(points, dtype=np.float32).reshape(-1, 2)
        left, top = pts.min(axis=0)
        right, bottom = pts.max(axis=0)
        return cls(float(left), float(top), float(right - left), float(bottom - top))

    def center(self) -> tuple:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def isInside(self, other, checkCenterOnly=False) -> bool:
        """
        Check if the current Bounds object is completely inside another Bounds object.

        Parameters:
        - other (Bounds): The other Bounds object to compare against.
        - checkCenterOnly (bool): Only require the center to be inside.

        Returns:
        - bool: True if the current Bounds object is inside the other Bounds object.
        """
        if checkCenterOnly:
            center = self.center()
            return Bounds(center[0], center[1], 0, 0).isInside(other)

        return (self.left >= other.left and self.left + self.width <= other.left + other.width
                and self.top >= other.top and self.top + self.height <= other.top + other.height)

    def inset(self, margin) -> "Bounds":
        """
        Shrink the bounds by `margin` on every side.

        The margin is clamped so the result never has a negative size.
        """
        margin = max(0.0, min(float(margin), self.width / 2, self.height / 2))
        return Bounds(self.left + margin, self.top + margin, self.width - 2 * margin, self.height - 2 * margin)

    def corners(self) -> np.ndarray:
        """Corners ordered top-left, top-right, bottom-right, bottom-left."""
        right = self.left + self.width
        bottom = self.top + self.height
        return np.array([
            [self.left, self.top],
            [right, self.top],
            [right, bottom],
            [self.left, bottom]
        ], dtype=np.float32)

    def area(self):
        """
        Calculate the area of the Bounds object.

        Returns:
        - The area of the Bounds object.
        """
        return self.width * self.height
