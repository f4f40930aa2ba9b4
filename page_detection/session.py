"""
Live-preview detection session.

Wraps PageDetector for a stream of camera frames: throttles how often the
detector runs and shows a temporary default frame after a run of misses, so
the preview never stays empty for long. Create one session per scanning
session and drop it afterwards.
"""

import logging
import time
from typing import Callable, Optional

import numpy as np

from common import config
from .detector import DetectionOptions, PageDetector, default_corners
from .fallback import FallbackChain

logger = logging.getLogger(__name__)


class DetectionSession:
    """
    Stateful wrapper around PageDetector for continuous frames.

    Attributes:
        failures: Consecutive frames without an accepted candidate
        last_corners: Result returned for the last processed frame
    """

    def __init__(
        self,
        detector: Optional[PageDetector] = None,
        min_interval: Optional[float] = None,
        max_failures: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the session.

        Args:
            detector: Detector to use; its default fallback is turned off so
                misses can be counted
            min_interval: Minimum seconds between two detector runs
            max_failures: Consecutive misses before the default frame is shown
            clock: Time source used when submit() gets no timestamp
        """
        base = detector.options if detector is not None else DetectionOptions()
        strategies = detector.strategies if detector is not None else None
        self.detector = PageDetector(base.copy(use_default_fallback=False), strategies)
        self.default_margin_ratio = base.default_margin_ratio

        self.min_interval = config.min_interval() if min_interval is None else min_interval
        self.max_failures = config.max_failures() if max_failures is None else max_failures
        self.clock = clock

        self.failures = 0
        self.last_corners: Optional[np.ndarray] = None
        self.last_run: Optional[float] = None

    def reset(self) -> None:
        self.failures = 0
        self.last_corners = None
        self.last_run = None

    def should_run(self, timestamp: float) -> bool:
        return self.last_run is None or timestamp - self.last_run >= self.min_interval

    def submit(self, frame: np.ndarray, timestamp: Optional[float] = None) -> Optional[np.ndarray]:
        """
        Offer a frame to the session.

        Args:
            frame: Camera frame (not modified)
            timestamp: Frame time in seconds, defaults to the session clock

        Returns:
            Corners for the preview overlay, or None while no page was found
            and the miss limit has not been reached. Throttled frames get the
            previous result.
        """
        now = self.clock() if timestamp is None else timestamp
        if not self.should_run(now):
            return self.last_corners
        self.last_run = now

        chain = FallbackChain([
            ('detector', self._detect),
            ('default', self._default_after_failures),
        ])
        self.last_corners = chain.run(frame)
        return self.last_corners

    def _detect(self, frame: np.ndarray) -> Optional[np.ndarray]:
        corners = self.detector.detect(frame)
        if corners is None:
            self.failures += 1
        else:
            self.failures = 0
        return corners

    def _default_after_failures(self, frame: np.ndarray) -> Optional[np.ndarray]:
        if self.failures < self.max_failures:
            return None
        if self.failures == self.max_failures:
            logger.info("No page found in %d consecutive frames, showing default frame", self.failures)
        h, w = frame.shape[:2]
        return default_corners(w, h, self.default_margin_ratio)
