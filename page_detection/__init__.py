"""
Page Detection Module

Finds the four corners of a document page in a photo or camera frame.
"""

from .detector import DetectionOptions, PageDetector, default_corners, detect_corners
from .session import DetectionSession
from .strategies import AdaptiveThresholdStrategy, ContourStrategy, EdgeStrategy, SegmentationStrategy
from .visualizer import PageVisualizer

__all__ = [
    'DetectionOptions',
    'PageDetector',
    'DetectionSession',
    'PageVisualizer',
    'ContourStrategy',
    'EdgeStrategy',
    'AdaptiveThresholdStrategy',
    'SegmentationStrategy',
    'default_corners',
    'detect_corners',
]
