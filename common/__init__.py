"""
Shared helpers for page detection and rectification.
"""

from .bounds import Bounds
from .errors import ScannerError, InvalidImageError, DegenerateQuadrilateralError
from .geometry import order_corners

__all__ = [
    'Bounds',
    'ScannerError',
    'InvalidImageError',
    'DegenerateQuadrilateralError',
    'order_corners',
]
