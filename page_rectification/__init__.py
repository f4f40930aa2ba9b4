"""
Page Rectification Module

Warps a detected page into a flat image and optionally enhances it.
"""

from .enhancer import EnhanceMode, enhance
from .rectifier import RectifyOptions, compute_homography, output_size, rectify

__all__ = [
    'EnhanceMode',
    'RectifyOptions',
    'compute_homography',
    'enhance',
    'output_size',
    'rectify',
]
