"""
Error types raised by the scanner engine.
"""


class ScannerError(Exception):
    """Base class for all scanner errors."""


class InvalidImageError(ScannerError, ValueError):
    """Input image is missing, empty, zero-size or of an unsupported type."""


class DegenerateQuadrilateralError(ScannerError, ValueError):
    """Corner set cannot describe a convex page (coincident, collinear, crossed)."""
